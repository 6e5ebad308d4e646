"""depinsight - dependency insight for npm projects."""

# Load .env so DEPINSIGHT_NPM, DEPINSIGHT_GITHUB_TOKEN, etc. are set
# for any entry point (CLI, pytest) that imports depinsight.
from dotenv import load_dotenv

load_dotenv()

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"


class DepInsightError(Exception):
    """Base error for failures that stop a report from being produced."""

    pass
