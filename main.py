import json
import logging
import os
import sys

import click

import git_commands
from git_errors import GitGraphError
from settings import settings


def _echo_json(data):
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _run(command, *args):
    try:
        return command(*args)
    except GitGraphError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
def cli():
    """Commit graph of a git repository as JSON."""


@cli.command()
@click.argument("repo_path", type=click.Path(exists=False))
def refs(repo_path):
    """List branches, tags, HEAD and stashes with the commit they point at."""
    _echo_json(_run(git_commands.list_references, repo_path))
    settings.add_recent_repository(os.path.abspath(repo_path))


@cli.command()
@click.argument("repo_path", type=click.Path(exists=False))
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Commits per page")
@click.option("--skip", type=click.IntRange(min=0), default=0, help="Commits already loaded")
def commits(repo_path, limit, skip):
    """One page of the commit graph."""
    if limit is None:
        limit = settings.get_page_size()
    _echo_json(_run(git_commands.list_commits, repo_path, limit, skip))
    settings.add_recent_repository(os.path.abspath(repo_path))


@cli.command()
@click.argument("repo_path", type=click.Path(exists=False))
@click.argument("old_commit")
@click.argument("new_commit")
def diff(repo_path, old_commit, new_commit):
    """Changed files between two commits, with full old/new content."""
    _echo_json(_run(git_commands.get_diff, repo_path, old_commit, new_commit))


@cli.command()
@click.argument("repo_path", type=click.Path(exists=False))
@click.argument("commit_id")
def checkout(repo_path, commit_id):
    """Detach HEAD at a commit."""
    _run(git_commands.checkout_commit, repo_path, commit_id)
    click.echo(f"HEAD is now at {commit_id}")


@cli.command()
@click.argument("repo_path", type=click.Path(exists=False))
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Commits to count")
def authors(repo_path, limit):
    """Commit count per author."""
    if limit is None:
        limit = settings.get_page_size()
    _echo_json(_run(git_commands.list_authors, repo_path, limit))


def setup_logging():
    # 根据环境变量设置日志级别
    log_level = logging.DEBUG if os.getenv("DEBUG") == "1" else logging.INFO

    # 配置日志，输出到 stderr 以免混入 JSON
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s",
        stream=sys.stderr,
    )
    # add file handler
    if os.getenv("LOG_TO_FILE") == "1":
        file_handler = logging.FileHandler("gitgraph.log")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def main():
    setup_logging()
    cli()


if __name__ == "__main__":
    main()
