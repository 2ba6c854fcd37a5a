"""Main script for running the claim verifier interactively."""

import asyncio
import logging

from .domain.models.verification import ClaimStatus
from .infrastructure.dependencies import ServiceContainer


async def main():
    """Run the claim verifier."""
    logging.basicConfig(level=logging.WARNING)

    print("Claim Verifier - extraction, reasoning and trust analysis")
    print("---------------------------------------------------------")

    container = ServiceContainer()
    try:
        service = await container.get_verification_service()

        while True:
            text = input("\nEnter text to verify (or 'quit' to exit): ")
            if text.lower() in ('quit', 'exit', 'q'):
                break

            print("\nVerifying claims...")
            results = await service.verify_claims_in_text(text)
            if not results:
                print("Nothing to verify.")
                continue

            for i, result in enumerate(results, 1):
                print(f"\n{i}. {result.claim_text}")
                print(f"   Status: {result.status.value}")
                if result.confidence is not None:
                    print(f"   Confidence: {result.confidence:.0%}")
                if result.trust_analysis is not None:
                    print(f"   Trust score: {result.trust_analysis.score:.0%}")
                print(f"   Explanation: {result.explanation}")
                if result.corrected_information:
                    print(f"   Correction: {result.corrected_information}")
                if result.status == ClaimStatus.ERROR and result.error_message:
                    print(f"   Error: {result.error_message}")
                for source in result.real_sources:
                    print(f"   - {source.title} ({source.url})")

    finally:
        # Clean up
        await container.shutdown()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
