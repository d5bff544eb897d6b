"""
Streamlit UI for the Artemis targeting agent.

Ask audience questions against the sample sheet, an uploaded CSV export, or
the live Google Sheet, and inspect how the pathways were ranked.
"""

import streamlit as st
import pandas as pd
import plotly.express as px

from artemis import config
from artemis.agents.targeting_agent import TargetingAgent
from artemis.analyzers.pathway_resolver import PathwayResolver
from artemis.api.local_sources import CsvDatasetSource
from artemis.api.sheets_client import GoogleSheetsSource
from artemis.models.pathway import ResolutionStatus
from artemis.orchestrator import build_resolver
from artemis.utils.audit_logger import AuditLogger


st.set_page_config(
    page_title="Artemis Targeting Agent",
    page_icon="🎯",
    layout="wide",
    initial_sidebar_state="expanded"
)


def initialize_session_state():
    """Initialize Streamlit session state."""
    if 'history' not in st.session_state:
        st.session_state.history = []


def create_score_chart(result):
    """Create bar chart of candidate scores."""
    df = pd.DataFrame([
        {
            "Pathway": match.pathway.render(),
            "Score": match.score,
            "Row": match.sheet_row,
        }
        for match in result.matches
    ])

    fig = px.bar(
        df,
        x="Score",
        y="Pathway",
        orientation="h",
        hover_data=["Row"],
        title="Candidate Scores"
    )

    if result.profile == "column_priority":
        fig.add_vline(x=PathwayResolver.MIN_SCORE, line_dash="dash", line_color="gray", annotation_text="Threshold")
        fig.add_vline(x=PathwayResolver.HIGH_CONFIDENCE, line_dash="dash", line_color="green", annotation_text="High")

    fig.update_layout(height=max(250, 60 * len(df)), yaxis={"autorange": "reversed"})
    return fig


def build_source(source_choice, upload):
    if source_choice == "Google Sheet":
        return GoogleSheetsSource()
    if source_choice == "Upload CSV" and upload is not None:
        return CsvDatasetSource(upload)
    return CsvDatasetSource(config.SAMPLE_DATASET_CSV)


def main():
    """Main Streamlit app."""
    initialize_session_state()

    st.title("🎯 Artemis - Audience Targeting")
    st.markdown(f"**Pathways from the {config.SHEET_TITLE} sheet**")

    st.sidebar.header("⚙️ Configuration")

    source_choice = st.sidebar.radio(
        "Dataset",
        ["Sample sheet", "Upload CSV", "Google Sheet"],
        help="Google Sheet uses GOOGLE_SHEET_ID and service account credentials"
    )
    upload = None
    if source_choice == "Upload CSV":
        upload = st.sidebar.file_uploader("CSV export", type=["csv"])

    profile = st.sidebar.selectbox(
        "Profile",
        ["column_priority", "keyword"],
        help="column_priority searches Description, Demographic, Grouping, Category in order"
    )

    scorer = st.sidebar.selectbox(
        "Scorer",
        ["phrase_overlap", "edit_distance"],
        disabled=(profile != "column_priority")
    )

    location = demographic = None
    if profile == "keyword":
        location = st.sidebar.text_input("Location (optional)") or None
        demographic = st.sidebar.text_input("Demographic (optional)") or None

    query = st.text_input("Describe the audience", placeholder="e.g. car enthusiasts")

    if st.button("🔍 Find Pathways", type="primary") and query.strip():
        agent = TargetingAgent(
            dataset_source=build_source(source_choice, upload),
            resolver=build_resolver(profile, scorer),
            audit_logger=AuditLogger(log_file="streamlit_audit.jsonl")
        )
        with st.spinner("Searching the audience sheet..."):
            result = agent.run(query, location=location, demographic=demographic)
        st.session_state.history.insert(0, result)

    if not st.session_state.history:
        st.info("👆 Describe an audience and click 'Find Pathways'")
        return

    result = st.session_state.history[0]

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Status", result.status.value.replace("_", " ").title())
    with col2:
        st.metric(
            "Matched Column",
            result.matched_column.label if result.matched_column else "none"
        )
    with col3:
        st.metric("Confidence", result.confidence or "-")

    if result.status == ResolutionStatus.MATCHED:
        st.success(result.response)
        st.plotly_chart(create_score_chart(result), use_container_width=True)

        st.markdown("### 📋 All Matches")
        st.dataframe(
            pd.DataFrame([
                {
                    "Pathway": match.pathway.render(),
                    "Score": round(match.score, 1),
                    "Matched Text": match.matched_text,
                    "Details": "; ".join(match.match_details),
                    "Sheet Row": match.sheet_row,
                }
                for match in result.matches
            ]),
            use_container_width=True
        )
    elif result.status == ResolutionStatus.NO_MATCH:
        st.warning(result.response)
    else:
        st.error(result.message)
        for suggestion in result.suggestions:
            st.markdown(f"- {suggestion}")

    if len(st.session_state.history) > 1:
        st.markdown("---")
        st.markdown("### 🕘 Previous Queries")
        st.dataframe(
            pd.DataFrame([
                {
                    "Query": r.query,
                    "Status": r.status.value,
                    "Top Pathway": r.rendered_pathways()[0] if r.pathways else "",
                    "Confidence": r.confidence or "",
                }
                for r in st.session_state.history[1:]
            ]),
            use_container_width=True
        )


if __name__ == "__main__":
    main()
