'''
release-operations, intended to be called from GitHub-Actions-workflows (one operation per
workflow-step). Version-tags are validated (and target branches resolved) before issuing any
request against GitHub, so invalid version-tags are rejected without side-effects.
'''

import logging

import github3.exceptions
import github3.pulls
import github3.repos
import github3.repos.release

import ghapi.limits
import ghapi.release
import release_orchestrator.branches as rob
import release_orchestrator.model as rom
import release_orchestrator.notes as ron

logger = logging.getLogger(__name__)


def target_branch(
    version_tag: str,
    release_cfg: rom.ReleaseCfg=None,
    default_branch: str=None,
) -> str:
    '''
    returns the branch to release given version-tag from. If `default_branch` is passed, it is
    used as is (for repositories w/ only one release-line); otherwise the branch is looked up
    from `release_cfg.branches`.
    '''
    if default_branch:
        # still required for lookup of previous release
        rob.major_prefix(version_tag)
        return default_branch

    release_cfg = release_cfg or rom.ReleaseCfg()

    return rob.resolve_branch(
        version_tag=version_tag,
        branches=release_cfg.branches,
    )


def target_commitish(
    version_tag: str,
    release_cfg: rom.ReleaseCfg=None,
    default_branch: str=None,
) -> str:
    release_cfg = release_cfg or rom.ReleaseCfg()

    return rob.commitish(
        branch=target_branch(
            version_tag=version_tag,
            release_cfg=release_cfg,
            default_branch=default_branch,
        ),
        qualified=release_cfg.qualify_commitish,
    )


def previous_release_tag(
    repository: github3.repos.Repository,
    version_tag: str,
) -> str:
    previous_release = rob.find_previous_release(
        releases=ghapi.release.iter_releases(repository),
        version_tag=version_tag,
    )
    return previous_release.tag_name


def generate_release_notes(
    repository: github3.repos.Repository,
    version_tag: str,
    target_commitish: str,
) -> str:
    previous_tag_name = previous_release_tag(
        repository=repository,
        version_tag=version_tag,
    )

    logger.info(f'generating release-notes {previous_tag_name=} -> {version_tag=}')
    release_notes = ghapi.release.generate_release_notes(
        repository=repository,
        tag_name=version_tag,
        target_commitish=target_commitish,
        previous_tag_name=previous_tag_name,
    )

    return ron.strip_release_pr_lines(release_notes)


def _fitting_body(
    body: str,
    limit: int,
) -> str:
    body, fits = ghapi.limits.body_or_replacement(
        body=body,
        limit=limit,
    )
    if not fits:
        logger.warning(f'release-notes exceed GitHub\'s limit ({limit=}), using replacement')

    return body


def generate_pr(
    repository: github3.repos.Repository,
    version_tag: str,
    release_cfg: rom.ReleaseCfg=None,
    default_branch: str=None,
) -> github3.pulls.ShortPullRequest:
    '''
    opens a pullrequest from `release/<version-tag>` into the release's target branch, w/
    generated release-notes as body.
    '''
    release_cfg = release_cfg or rom.ReleaseCfg()

    base = target_branch(
        version_tag=version_tag,
        release_cfg=release_cfg,
        default_branch=default_branch,
    )

    release_notes = generate_release_notes(
        repository=repository,
        version_tag=version_tag,
        target_commitish=rob.commitish(
            branch=base,
            qualified=release_cfg.qualify_commitish,
        ),
    )

    head = rom.release_branch_name(version_tag)
    logger.info(f'creating release-pullrequest {head=} -> {base=}')

    return repository.create_pull(
        title=rom.release_pr_title(version_tag),
        base=base,
        head=head,
        body=_fitting_body(
            body=release_notes,
            limit=ghapi.limits.pullrequest_body,
        ),
    )


def delete_release_branch(
    repository: github3.repos.Repository,
    version_tag: str,
) -> bool:
    '''
    best-effort removal of the (merged) release-branch. Errors are logged, but not raised.
    '''
    branch = rom.release_branch_name(version_tag)

    try:
        deleted = ghapi.release.delete_branch(
            repository=repository,
            branch=branch,
        )
    except github3.exceptions.GitHubException as ghe:
        logger.warning(f'failed to delete {branch=}: {ghe}')
        return False

    if deleted:
        logger.info(f'deleted {branch=}')
    else:
        logger.warning(f'did not delete {branch=}')

    return deleted


def release(
    repository: github3.repos.Repository,
    version_tag: str,
    release_cfg: rom.ReleaseCfg=None,
    default_branch: str=None,
) -> github3.repos.release.Release:
    '''
    publishes a (final) release for given version-tag, w/ generated release-notes as body. If
    configured, the release-branch is deleted afterwards; failing to do so will not fail the
    release.
    '''
    release_cfg = release_cfg or rom.ReleaseCfg()

    commitish = target_commitish(
        version_tag=version_tag,
        release_cfg=release_cfg,
        default_branch=default_branch,
    )

    release_notes = generate_release_notes(
        repository=repository,
        version_tag=version_tag,
        target_commitish=commitish,
    )

    logger.info(f'publishing release {version_tag=} {commitish=}')
    gh_release = ghapi.release.create_release(
        repository=repository,
        tag_name=version_tag,
        target_commitish=commitish,
        name=version_tag,
        body=_fitting_body(
            body=release_notes,
            limit=ghapi.limits.release_body,
        ),
    )

    if release_cfg.delete_release_branch:
        delete_release_branch(
            repository=repository,
            version_tag=version_tag,
        )

    return gh_release
