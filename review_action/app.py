from dotenv import load_dotenv

# Load .env BEFORE building settings so local runs mirror the Actions environment
load_dotenv()

import logging  # noqa: E402
import sys  # noqa: E402

from common.git_client import configure_git  # noqa: E402
from review_action.services.github_service import GitHubService  # noqa: E402
from review_action.services.review_service import execute_pr_review  # noqa: E402
from reviewagent.agent.engine import build_engine  # noqa: E402
from reviewagent.config import ReviewConfig, build_review_context, load_config  # noqa: E402
from reviewagent.models.review_schemas import ReviewRunReport  # noqa: E402

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def run(config: ReviewConfig) -> ReviewRunReport:
    """
    Review the pull request described by ``config``.

    Configuration, git setup and file discovery errors propagate.
    """
    context = build_review_context(config)
    logger.info(f"Repository: {context.full_name}")
    logger.info(f"PR Number: {context.pull_number}")

    if config.configure_git:
        configure_git(config.workspace, timeout=config.git_timeout)

    host = GitHubService(config.github_token, context, page_size=config.page_size)
    engine = build_engine(config)
    return execute_pr_review(config, context, host, engine)


def main() -> int:
    """Console entry point. Returns the process exit status."""
    config = load_config()
    setup_logging(config.log_level)

    logger.info("Starting PR review process...")
    try:
        report = run(config)
    except Exception:
        logger.exception("PR review process failed")
        return 1

    logger.info(
        f"PR review process completed: {len(report.batches)} batch(es), "
        f"{report.comments_posted} inline comment(s)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
