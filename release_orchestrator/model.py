import dataclasses
import os
import typing

import dacite
import yaml

# title of release-pullrequests is `[Release] <version-tag>`; GitHub's release-notes-generator
# picks up the merge-commits of those pullrequests
RELEASE_PR_TITLE_PREFIX = '[Release] '
RELEASE_PR_MARKER = f'{RELEASE_PR_TITLE_PREFIX}v'
RELEASE_BRANCH_PREFIX = 'release/'

DEFAULT_CFG_PATH = os.path.join('.github', 'release-cfg.yaml')


def default_branches() -> dict[str, str]:
    return {
        'v6.': 'main',
        'v5.': 'v5.x',
    }


class ReleaseOrchestratorError(Exception):
    pass


class UnsupportedVersionError(ReleaseOrchestratorError, ValueError):
    def __init__(
        self,
        version_tag: str,
        reason: str='unsupported major-version',
    ):
        self.version_tag = version_tag
        self.reason = reason
        super().__init__(f'{reason}: {version_tag=}')


class NoMatchingReleaseError(ReleaseOrchestratorError, LookupError):
    def __init__(
        self,
        version_tag: str,
        prefix: str,
    ):
        self.version_tag = version_tag
        self.prefix = prefix
        super().__init__(f'did not find any release w/ tag starting with {prefix=} ({version_tag=})')


def release_branch_name(version_tag: str) -> str:
    return f'{RELEASE_BRANCH_PREFIX}{version_tag}'


def release_pr_title(version_tag: str) -> str:
    return f'{RELEASE_PR_TITLE_PREFIX}{version_tag}'


@dataclasses.dataclass
class ReleaseCfg:
    '''
    model-class for release-configuration, expected (by default) at `.github/release-cfg.yaml`.

    `branches` maps major-version-prefixes (e.g. `v6.`) to the branch releases are created from.
    '''
    branches: dict[str, str] = dataclasses.field(default_factory=default_branches)
    qualify_commitish: bool = True
    delete_release_branch: bool = True

    def __post_init__(self):
        for prefix, branch in self.branches.items():
            if not prefix.endswith('.') or prefix.count('.') != 1:
                raise ValueError(f'{prefix=} must end with, and contain exactly one "."')
            if not branch:
                raise ValueError(f'branch for {prefix=} must not be empty')

    @staticmethod
    def from_dict(raw: dict) -> typing.Self:
        return dacite.from_dict(
            data_class=ReleaseCfg,
            data=raw,
            config=dacite.Config(
                convert_key=lambda key: key.replace('_', '-'),
            ),
        )


def load_release_cfg(
    path: str=DEFAULT_CFG_PATH,
    absent_ok: bool=True,
) -> ReleaseCfg:
    if not os.path.isfile(path):
        if not absent_ok:
            raise ValueError(f'not an existing file: {path=}')
        return ReleaseCfg()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not raw:
        return ReleaseCfg()

    return ReleaseCfg.from_dict(raw)
