"""
Example: List recommended Linux server builds.

Usage:
    export GITHUB_TOKEN=your_token_here
    python examples/list_artifacts.py
"""

import asyncio

from artifact_harvester import ArtifactsQuery, ArtifactsService


async def main():
    service = ArtifactsService()

    query = ArtifactsQuery(platform="linux", status="recommended", limit=5)
    artifacts = await service.get_artifacts(query)

    for artifact in artifacts:
        print(f"{artifact.version}  {artifact.support_status.value:<12} {artifact.url}")


if __name__ == "__main__":
    asyncio.run(main())
