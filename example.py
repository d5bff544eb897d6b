"""
Quick example demonstrating the Artemis targeting agent.

Run this to see the agent answer a few queries against the bundled sample
audience sheet (no Google credentials needed).
"""

from artemis import config
from artemis.api.local_sources import CsvDatasetSource
from artemis.orchestrator import TargetingOrchestrator


def main():
    print("\n" + "=" * 70)
    print(" ARTEMIS TARGETING AGENT - DEMO")
    print("=" * 70 + "\n")

    orchestrator = TargetingOrchestrator(
        dataset_source=CsvDatasetSource(config.SAMPLE_DATASET_CSV),
        profile="column_priority"
    )

    results = orchestrator.run_queries([
        "car enthusiasts",
        "home improvement customers",
        "dog owners",
        "age 55+",
        "xyz nonsense",
    ])

    print("\n" + "=" * 70)
    print(" TOOL PAYLOAD (First Query)")
    print("=" * 70 + "\n")

    payload = results[0].to_dict()
    print(f"  Success:        {payload['success']}")
    print(f"  Matched column: {payload['matchedColumn']}")
    print(f"  Confidence:     {payload['confidence']}")
    for pathway in payload["pathways"]:
        print(f"  Pathway:        {pathway}")

    print("\n" + "=" * 70)
    print(" END OF DEMO")
    print("=" * 70 + "\n")

    print(f"✅ Check '{config.AUDIT_LOG_FILE}' for full audit trail")


if __name__ == "__main__":
    main()
