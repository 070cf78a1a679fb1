'''
utils wrapping github3.py's release-API

github3.py neither exposes the "generate-notes" endpoint, nor allows passing
`generate_release_notes` when creating releases. Those calls are issued through the
repository's (authenticated) session.
'''

import collections.abc
import logging

import github3.repos
import github3.repos.release

logger = logging.getLogger(__name__)


def iter_releases(
    repository: github3.repos.Repository,
) -> collections.abc.Iterable[github3.repos.release.Release]:
    '''
    yields releases of given repository, newest first (as returned by GitHub). Pages are fetched
    lazily, so callers that stop iterating early will not retrieve the full release-history.
    '''
    yield from repository.releases(number=-1)


# pylint: disable=protected-access
# noinspection PyProtectedMember
def generate_release_notes(
    repository: github3.repos.Repository,
    tag_name: str,
    target_commitish: str=None,
    previous_tag_name: str=None,
) -> str:
    '''
    lets GitHub generate release-notes for the given (not necessarily existing) tag, and returns
    the generated markdown-body.

    see: https://docs.github.com/en/rest/releases/releases#generate-release-notes-content-for-a-release
    '''
    data = {
        'tag_name': tag_name,
    }
    if target_commitish:
        data['target_commitish'] = target_commitish
    if previous_tag_name:
        data['previous_tag_name'] = previous_tag_name

    url = repository._build_url('releases', 'generate-notes', base_url=repository._api)
    res = repository._post(url, data=data)

    return repository._json(res, 200)['body']


# pylint: disable=protected-access
# noinspection PyProtectedMember
def create_release(
    repository: github3.repos.Repository,
    tag_name: str,
    target_commitish: str,
    name: str,
    body: str,
) -> github3.repos.release.Release:
    '''
    publishes a final release (neither draft, nor prerelease). GitHub's own release-notes
    generation is always disabled; the passed body is used as is.
    '''
    data = {
        'tag_name': tag_name,
        'target_commitish': target_commitish,
        'name': name,
        'body': body,
        'draft': False,
        'prerelease': False,
        'generate_release_notes': False,
    }

    url = repository._build_url('releases', base_url=repository._api)
    res = repository._post(url, data=data)
    json = repository._json(res, 201)

    return repository._instance_or_null(github3.repos.release.Release, json)


def delete_branch(
    repository: github3.repos.Repository,
    branch: str,
) -> bool:
    '''
    deletes the given branch (passed w/o `heads/`-prefix). Returns whether the branch was
    actually deleted; errors from GitHub are propagated.
    '''
    ref_name = f'heads/{branch}'

    if not (ref := repository.ref(ref_name)):
        logger.info(f'{ref_name=} does not exist')
        return False

    return ref.delete()
