# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import os

import github3
import github3.repos


def host_org_and_repo(
    repo_url: str=None,
) -> tuple[str, str, str]:
    '''
    returns a three-tuple of `host`, `org`, `repo`. If repo_url is passed, it is assumed point to
    a github-hosted repository (it may or may not have a schema). Otherwise, fallback to
    environment variables GITHUB_SERVER_URL, GITHUB_REPOSITORY, as set for GitHub-Actions-runs
    is done.
    '''
    if repo_url:
        if '://' in repo_url:
            repo_url = repo_url.split('://')[-1]
        host, org, repo = repo_url.strip('/').split('/')
    else:
        host = os.environ['GITHUB_SERVER_URL'].removeprefix('https://')
        org, repo = os.environ['GITHUB_REPOSITORY'].split('/')

    return host, org, repo


def github_api(
    repo_url: str=None,
    token: str=None,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance, honouring some environment variables typically
    present for GitHub-Actions-runs.

    The token is expected to be handed in by the surrounding workflow (e.g. the default
    `GITHUB_TOKEN`); no further authentication is done.
    '''
    host, _, _ = host_org_and_repo(
        repo_url=repo_url,
    )

    token = token or os.environ.get('GITHUB_TOKEN')

    if host == 'github.com':
        return github3.GitHub(token=token)

    server_url = os.environ.get('GITHUB_SERVER_URL', f'https://{host}')
    return github3.GitHubEnterprise(
        url=server_url,
        token=token,
    )


def repository(
    repo_url: str=None,
    token: str=None,
) -> github3.repos.Repository:
    _, org, repo = host_org_and_repo(
        repo_url=repo_url,
    )
    api = github_api(
        repo_url=repo_url,
        token=token,
    )

    return api.repository(
        owner=org,
        repository=repo,
    )
