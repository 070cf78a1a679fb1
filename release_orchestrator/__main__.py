import argparse
import dataclasses
import logging
import os
import sys

import ci.log
import ghapi
import release_orchestrator.branches as rob
import release_orchestrator.model as rom
import release_orchestrator.operations as roo

'''
exposes a CLI for release-operations, intended to be run as steps of GitHub-Actions-workflows.
'''

logger = logging.getLogger(__name__)


def _write_output(name: str, value: str):
    '''
    exposes given value as step-output if running in GitHub-Actions (i.e. GITHUB_OUTPUT is set)
    '''
    if not (output_path := os.environ.get('GITHUB_OUTPUT')):
        return

    with open(output_path, 'a') as f:
        f.write(f'{name}={value}\n')


def _write_result(text: str, outfile: str='-'):
    if not text.endswith('\n'):
        text = f'{text}\n'

    if outfile == '-':
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    with open(outfile, 'w') as f:
        f.write(text)


def release_notes(parsed, repository, release_cfg: rom.ReleaseCfg):
    release_notes = roo.generate_release_notes(
        repository=repository,
        version_tag=parsed.version_tag,
        target_commitish=roo.target_commitish(
            version_tag=parsed.version_tag,
            release_cfg=release_cfg,
            default_branch=parsed.default_branch,
        ),
    )
    _write_result(release_notes, outfile=parsed.outfile)


def pull_request(parsed, repository, release_cfg: rom.ReleaseCfg):
    pull_request = roo.generate_pr(
        repository=repository,
        version_tag=parsed.version_tag,
        release_cfg=release_cfg,
        default_branch=parsed.default_branch,
    )
    if pull_request:
        logger.info(f'created release-pullrequest: {pull_request.html_url}')
        _write_output('pull-request-number', str(pull_request.number))


def release(parsed, repository, release_cfg: rom.ReleaseCfg):
    if parsed.keep_release_branch:
        release_cfg = dataclasses.replace(release_cfg, delete_release_branch=False)

    gh_release = roo.release(
        repository=repository,
        version_tag=parsed.version_tag,
        release_cfg=release_cfg,
        default_branch=parsed.default_branch,
    )
    if gh_release:
        logger.info(f'published release: {gh_release.html_url}')


def previous_release_tag(parsed, repository, release_cfg: rom.ReleaseCfg):
    tag_name = roo.previous_release_tag(
        repository=repository,
        version_tag=parsed.version_tag,
    )
    _write_result(tag_name)
    _write_output('previous-release-tag', tag_name)


def configure_parser(parser):
    subcmd_parsers = parser.add_subparsers(
        title='commands',
        required=True,
    )

    def add_common_arguments(subcmd_parser):
        subcmd_parser.add_argument(
            '--version-tag',
            required=True,
            help='the version-tag to operate on (e.g. v6.2.0)',
        )
        subcmd_parser.add_argument(
            '--repo-url',
            required=False,
            default=None,
            help='github-repo-url ({host}/{org}/{repo}). derived from GitHubActions-Env-Vars by default',
        )
        subcmd_parser.add_argument(
            '--github-auth-token',
            default=os.environ.get('GITHUB_TOKEN', None),
            help='the github-auth-token to use (defaults to GitHub-Action\'s default)',
        )
        subcmd_parser.add_argument(
            '--default-branch',
            default=None,
            help='if passed, releases are created from this branch (instead of mapped branch)',
        )
        subcmd_parser.add_argument(
            '--cfg',
            default=rom.DEFAULT_CFG_PATH,
            help='path to release-cfg (optional; defaults are used if absent)',
        )

    release_notes_parser = subcmd_parsers.add_parser(
        'release-notes',
        help='generate release-notes (diff to previous release of same major-version)',
    )
    release_notes_parser.set_defaults(callable=release_notes, requires_branch=True)
    add_common_arguments(release_notes_parser)
    release_notes_parser.add_argument(
        '--outfile', '-o',
        required=False,
        default='-',
        help='where to write release-notes to (defaults to writing to stdout)',
    )

    pull_request_parser = subcmd_parsers.add_parser(
        'pull-request',
        help='open release-pullrequest (from release/<version-tag>)',
    )
    pull_request_parser.set_defaults(callable=pull_request, requires_branch=True)
    add_common_arguments(pull_request_parser)

    release_parser = subcmd_parsers.add_parser(
        'release',
        help='publish release, and delete release-branch',
    )
    release_parser.set_defaults(callable=release, requires_branch=True)
    add_common_arguments(release_parser)
    release_parser.add_argument(
        '--keep-release-branch',
        action='store_true',
        default=False,
        help='if set, release-branch will not be deleted after publishing',
    )

    previous_release_tag_parser = subcmd_parsers.add_parser(
        'previous-release-tag',
        help='print tag of previous release of same major-version',
    )
    previous_release_tag_parser.set_defaults(
        callable=previous_release_tag,
        requires_branch=False,
    )
    add_common_arguments(previous_release_tag_parser)


def main(argv=None):
    ci.log.configure_default_logging()

    parser = argparse.ArgumentParser()
    configure_parser(parser)

    parsed = parser.parse_args(argv)

    release_cfg = rom.load_release_cfg(
        path=parsed.cfg,
        absent_ok=parsed.cfg == rom.DEFAULT_CFG_PATH,
    )

    try:
        # reject unsupported version-tags before talking to GitHub
        if parsed.requires_branch:
            roo.target_branch(
                version_tag=parsed.version_tag,
                release_cfg=release_cfg,
                default_branch=parsed.default_branch,
            )
        else:
            rob.major_prefix(parsed.version_tag)

        repository = ghapi.repository(
            repo_url=parsed.repo_url,
            token=parsed.github_auth_token,
        )

        parsed.callable(
            parsed=parsed,
            repository=repository,
            release_cfg=release_cfg,
        )
    except rom.ReleaseOrchestratorError as roe:
        logger.error(str(roe))
        exit(1)


if __name__ == '__main__':
    main()
