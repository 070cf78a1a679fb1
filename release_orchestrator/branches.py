import collections.abc
import logging

import github3.repos.release

import release_orchestrator.model as rom

logger = logging.getLogger(__name__)


def major_prefix(version_tag: str) -> str:
    '''
    returns the major-version-prefix of given version-tag, i.e. everything up to (and including)
    the first `.` (e.g. `v6.` for `v6.2.0`).
    '''
    if not version_tag:
        raise rom.UnsupportedVersionError(version_tag, reason='version-tag must not be empty')

    head, sep, _ = version_tag.partition('.')
    if not sep or not head:
        raise rom.UnsupportedVersionError(
            version_tag,
            reason='version-tag has no major-version-prefix',
        )

    return f'{head}{sep}'


def resolve_branch(
    version_tag: str,
    branches: collections.abc.Mapping[str, str]=None,
) -> str:
    if branches is None:
        branches = rom.default_branches()

    prefix = major_prefix(version_tag)

    if not (branch := branches.get(prefix)):
        raise rom.UnsupportedVersionError(
            version_tag,
            reason=f'no branch configured for {prefix=} (known: {", ".join(branches)})',
        )

    return branch


def commitish(
    branch: str,
    qualified: bool=True,
) -> str:
    if qualified:
        return f'heads/{branch}'
    return branch


def find_previous_release(
    releases: collections.abc.Iterable[github3.repos.release.Release],
    version_tag: str,
) -> github3.repos.release.Release:
    '''
    returns the first (i.e. most recent, as GitHub returns releases newest-first) release whose
    tag shares the major-version-prefix with given version-tag. Releases from other major-version
    lines are skipped, even if they are more recent.
    '''
    prefix = major_prefix(version_tag)

    for release in releases:
        if release.tag_name and release.tag_name.startswith(prefix):
            return release
        logger.debug(f'skipping {release.tag_name=} (does not match {prefix=})')

    raise rom.NoMatchingReleaseError(
        version_tag=version_tag,
        prefix=prefix,
    )
