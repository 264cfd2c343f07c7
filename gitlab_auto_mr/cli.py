"""Command-line entry point for gitlab-auto-mr."""

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console

from gitlab_auto_mr import __version__
from gitlab_auto_mr.client import GitLabClient
from gitlab_auto_mr.config import (
    DEFAULT_PIPELINE_TIMEOUT,
    DEFAULT_PREFIX,
    Config,
    normalize_base_url,
    parse_identifier_list,
)
from gitlab_auto_mr.errors import GitLabError
from gitlab_auto_mr.reconciler import Reconciler

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(
    name="gitlab-auto-mr",
    help="Create or update a GitLab merge request for the current CI branch",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(level: str) -> None:
    """Configure the root logger once for the whole run."""
    root_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        force=True,
    )
    # httpx logs every request at INFO; keep that for --log-level DEBUG only
    logging.getLogger("httpx").setLevel(logging.DEBUG if root_level <= logging.DEBUG else logging.WARNING)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"gitlab-auto-mr version: {__version__}")
        raise typer.Exit()


@app.command()
def run(
    private_token: str = typer.Option(
        "", "--private-token", envvar="GITLAB_PRIVATE_TOKEN", help="Private GitLab token", show_default=False
    ),
    source_branch: str = typer.Option(
        "", "--source-branch", envvar="CI_COMMIT_REF_NAME", help="Source branch to merge from"
    ),
    project_id: str = typer.Option("", "--project-id", envvar="CI_PROJECT_ID", help="GitLab project ID or path"),
    gitlab_url: str = typer.Option("", "--gitlab-url", envvar="CI_PROJECT_URL", help="GitLab URL"),
    user_id: str = typer.Option(
        "", "--user-id", envvar="GITLAB_USER_ID", help="User IDs or usernames to assign the MR to (comma-separated)"
    ),
    reviewer_id: str = typer.Option("", "--reviewer-id", help="Reviewer IDs or usernames (comma-separated)"),
    target_branch: str = typer.Option("", "--target-branch", "-t", help="Target branch to merge onto"),
    commit_prefix: str = typer.Option(DEFAULT_PREFIX, "--commit-prefix", "-c", help="Prefix for MR title"),
    title: str = typer.Option("", "--title", help="Custom MR title"),
    description: str = typer.Option("", "--description", "-d", help="Path to description file"),
    milestone: int | None = typer.Option(None, "--milestone", help="Milestone ID for the MR"),
    commit_title: str = typer.Option(
        "", "--commit-title", envvar="CI_COMMIT_TITLE", help="Commit title used as the default MR title"
    ),
    commit_sha: str = typer.Option("", "--commit-sha", envvar="CI_COMMIT_SHA", help="Commit whose pipeline to wait for"),
    remove_branch: bool = typer.Option(False, "--remove-branch", "-r", help="Remove source branch after merge"),
    squash_commits: bool = typer.Option(False, "--squash-commits", "-s", help="Squash commits on merge"),
    allow_collaboration: bool = typer.Option(False, "--allow-collaboration", "-a", help="Allow collaboration"),
    use_issue_name: bool = typer.Option(False, "--use-issue-name", "-i", help="Use issue data from branch name"),
    mr_exists: bool = typer.Option(False, "--mr-exists", help="Check if MR exists (dry run)"),
    update_mr: bool = typer.Option(False, "--update-mr", help="Update existing MR instead of creating new one"),
    create_only: bool = typer.Option(False, "--create-only", help="Only create new MR, fail if MR already exists"),
    auto_merge: bool = typer.Option(False, "--auto-merge", help="Merge the new MR once its pipeline succeeds"),
    wait_pipeline: bool = typer.Option(False, "--wait-pipeline", help="Wait for the commit's pipeline to succeed first"),
    pipeline_timeout: int = typer.Option(
        DEFAULT_PIPELINE_TIMEOUT, "--pipeline-timeout", help="Seconds to wait for the pipeline"
    ),
    insecure: bool = typer.Option(False, "--insecure", "-k", help="Skip SSL verification"),
    log_level: str = typer.Option("INFO", "--log-level", envvar="LOG_LEVEL", help="Logging level"),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Create, update or report on the merge request for SOURCE_BRANCH."""
    setup_logging(log_level)

    config = Config(
        private_token=private_token,
        source_branch=source_branch,
        project_id=project_id,
        gitlab_url=normalize_base_url(gitlab_url) if gitlab_url else "",
        assignees=parse_identifier_list(user_id),
        reviewers=parse_identifier_list(reviewer_id),
        target_branch=target_branch,
        commit_prefix=commit_prefix,
        title=title,
        description=description,
        milestone_id=milestone,
        commit_title=commit_title,
        commit_sha=commit_sha,
        remove_branch=remove_branch,
        squash_commits=squash_commits,
        allow_collaboration=allow_collaboration,
        use_issue_name=use_issue_name,
        mr_exists=mr_exists,
        update_mr=update_mr,
        create_only=create_only,
        auto_merge=auto_merge,
        wait_pipeline=wait_pipeline,
        pipeline_timeout=pipeline_timeout,
        insecure=insecure,
    )

    try:
        config.validate()
        client = GitLabClient(config.private_token, config.gitlab_url, insecure=config.insecure)
        try:
            result = Reconciler(config, client).run()
        finally:
            client.close()
    except GitLabError as e:
        err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(code=1) from e

    for warning in result.warnings:
        err_console.print(f"Warning: {warning}", markup=False, highlight=False, soft_wrap=True)
    console.print(result.message, markup=False, highlight=False, soft_wrap=True)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
