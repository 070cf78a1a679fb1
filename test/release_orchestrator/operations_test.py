import logging
import unittest.mock

import github3.exceptions
import pytest

import ghapi.release
import release_orchestrator.model as rom
import release_orchestrator.operations as roo


GENERATED_NOTES = '\n'.join((
    '## What\'s Changed',
    '* [Release] v6.1.0 by @release-bot in https://github.com/acme/product/pull/10',
    '* add feature by @octocat in https://github.com/acme/product/pull/11',
    '',
    '**Full Changelog**: https://github.com/acme/product/compare/v6.1.0...v6.2.0',
))

STRIPPED_NOTES = '\n'.join((
    '## What\'s Changed',
    '* add feature by @octocat in https://github.com/acme/product/pull/11',
    '',
    '**Full Changelog**: https://github.com/acme/product/compare/v6.1.0...v6.2.0',
))


@pytest.fixture
def generate_release_notes(monkeypatch):
    generate_release_notes = unittest.mock.MagicMock(return_value=GENERATED_NOTES)
    monkeypatch.setattr(ghapi.release, 'generate_release_notes', generate_release_notes)
    return generate_release_notes


@pytest.fixture
def create_release(monkeypatch):
    create_release = unittest.mock.MagicMock()
    monkeypatch.setattr(ghapi.release, 'create_release', create_release)
    return create_release


@pytest.fixture
def delete_branch(monkeypatch):
    delete_branch = unittest.mock.MagicMock(return_value=True)
    monkeypatch.setattr(ghapi.release, 'delete_branch', delete_branch)
    return delete_branch


def test_target_branch():
    assert roo.target_branch('v6.2.0') == 'main'
    assert roo.target_branch('v5.1.0') == 'v5.x'
    assert roo.target_branch('v6.2.0', default_branch='master') == 'master'
    assert roo.target_branch(
        'v1.0.0',
        release_cfg=rom.ReleaseCfg(branches={'v1.': 'release-v1'}),
    ) == 'release-v1'

    # explicitly passed branch requires a major-version-prefix nonetheless
    with pytest.raises(rom.UnsupportedVersionError):
        roo.target_branch('latest', default_branch='master')


def test_target_commitish():
    assert roo.target_commitish('v6.2.0') == 'heads/main'
    assert roo.target_commitish('v5.2.0') == 'heads/v5.x'
    assert roo.target_commitish(
        'v6.2.0',
        release_cfg=rom.ReleaseCfg(qualify_commitish=False),
    ) == 'main'
    assert roo.target_commitish('v1.0.0', default_branch='master') == 'heads/master'


def test_previous_release_tag(repository):
    assert roo.previous_release_tag(repository, 'v6.2.0') == 'v6.1.0'
    assert roo.previous_release_tag(repository, 'v5.9.1') == 'v5.9.0'


def test_previous_release_tag_no_match(repository):
    with pytest.raises(rom.NoMatchingReleaseError):
        roo.previous_release_tag(repository, 'v7.0.0')


def test_generate_release_notes(repository, generate_release_notes):
    release_notes = roo.generate_release_notes(
        repository=repository,
        version_tag='v6.2.0',
        target_commitish='heads/main',
    )

    assert release_notes == STRIPPED_NOTES
    generate_release_notes.assert_called_once_with(
        repository=repository,
        tag_name='v6.2.0',
        target_commitish='heads/main',
        previous_tag_name='v6.1.0',
    )


def test_generate_release_notes_wo_previous_release(repository, generate_release_notes):
    with pytest.raises(rom.NoMatchingReleaseError):
        roo.generate_release_notes(
            repository=repository,
            version_tag='v7.0.0',
            target_commitish='heads/main',
        )

    generate_release_notes.assert_not_called()


def test_generate_pr(repository, generate_release_notes):
    pull_request = roo.generate_pr(
        repository=repository,
        version_tag='v6.2.0',
    )

    assert pull_request is repository.create_pull.return_value
    repository.create_pull.assert_called_once_with(
        title='[Release] v6.2.0',
        base='main',
        head='release/v6.2.0',
        body=STRIPPED_NOTES,
    )
    _, kwargs = generate_release_notes.call_args
    assert kwargs['target_commitish'] == 'heads/main'


def test_generate_pr_v5(repository, generate_release_notes):
    roo.generate_pr(
        repository=repository,
        version_tag='v5.9.1',
    )

    _, kwargs = repository.create_pull.call_args
    assert kwargs['base'] == 'v5.x'
    assert kwargs['head'] == 'release/v5.9.1'
    _, kwargs = generate_release_notes.call_args
    assert kwargs['previous_tag_name'] == 'v5.9.0'
    assert kwargs['target_commitish'] == 'heads/v5.x'


def test_generate_pr_w_default_branch(repository, generate_release_notes):
    roo.generate_pr(
        repository=repository,
        version_tag='v6.2.0',
        release_cfg=rom.ReleaseCfg(qualify_commitish=False),
        default_branch='master',
    )

    _, kwargs = repository.create_pull.call_args
    assert kwargs['base'] == 'master'
    _, kwargs = generate_release_notes.call_args
    assert kwargs['target_commitish'] == 'master'


def test_generate_pr_unsupported_version(repository, generate_release_notes):
    with pytest.raises(rom.UnsupportedVersionError):
        roo.generate_pr(
            repository=repository,
            version_tag='v4.0.0',
        )

    # no request must have been issued
    assert repository.method_calls == []
    generate_release_notes.assert_not_called()


def test_generate_pr_body_too_large(repository, generate_release_notes, caplog):
    generate_release_notes.return_value = 'x' * 300000

    with caplog.at_level(logging.WARNING):
        roo.generate_pr(
            repository=repository,
            version_tag='v6.2.0',
        )

    _, kwargs = repository.create_pull.call_args
    assert kwargs['body'] == 'body was too large (limit: 262144 / actual: 300000)'
    assert 'exceed' in caplog.text


def test_generate_pr_propagates_errors(repository, generate_release_notes):
    response = unittest.mock.MagicMock(status_code=422)
    response.json.return_value = {'message': 'Validation Failed'}
    repository.create_pull.side_effect = github3.exceptions.UnprocessableEntity(response)

    with pytest.raises(github3.exceptions.UnprocessableEntity):
        roo.generate_pr(
            repository=repository,
            version_tag='v6.2.0',
        )


def test_release(repository, generate_release_notes, create_release, delete_branch):
    gh_release = roo.release(
        repository=repository,
        version_tag='v6.2.0',
    )

    assert gh_release is create_release.return_value
    create_release.assert_called_once_with(
        repository=repository,
        tag_name='v6.2.0',
        target_commitish='heads/main',
        name='v6.2.0',
        body=STRIPPED_NOTES,
    )
    delete_branch.assert_called_once_with(
        repository=repository,
        branch='release/v6.2.0',
    )


def test_release_order_of_calls(repository, generate_release_notes, create_release, delete_branch):
    calls = unittest.mock.MagicMock()
    calls.attach_mock(generate_release_notes, 'generate_release_notes')
    calls.attach_mock(create_release, 'create_release')
    calls.attach_mock(delete_branch, 'delete_branch')

    roo.release(
        repository=repository,
        version_tag='v6.2.0',
    )

    assert [name for name, _, _ in calls.mock_calls] == [
        'generate_release_notes',
        'create_release',
        'delete_branch',
    ]


def test_release_keeps_release_branch(
    repository,
    generate_release_notes,
    create_release,
    delete_branch,
):
    roo.release(
        repository=repository,
        version_tag='v6.2.0',
        release_cfg=rom.ReleaseCfg(delete_release_branch=False),
    )

    create_release.assert_called_once()
    delete_branch.assert_not_called()


def test_release_unsupported_version(
    repository,
    generate_release_notes,
    create_release,
    delete_branch,
):
    with pytest.raises(rom.UnsupportedVersionError):
        roo.release(
            repository=repository,
            version_tag='v7.0.0',
        )

    assert repository.method_calls == []
    generate_release_notes.assert_not_called()
    create_release.assert_not_called()
    delete_branch.assert_not_called()


def test_release_tolerates_failing_branch_deletion(
    repository,
    generate_release_notes,
    create_release,
    delete_branch,
    caplog,
):
    response = unittest.mock.MagicMock(status_code=422)
    response.json.return_value = {'message': 'Reference does not exist'}
    delete_branch.side_effect = github3.exceptions.UnprocessableEntity(response)

    with caplog.at_level(logging.WARNING):
        gh_release = roo.release(
            repository=repository,
            version_tag='v6.2.0',
        )

    assert gh_release is create_release.return_value
    assert 'failed to delete' in caplog.text
    assert 'release/v6.2.0' in caplog.text


def test_release_propagates_failing_release_creation(
    repository,
    generate_release_notes,
    create_release,
    delete_branch,
):
    response = unittest.mock.MagicMock(status_code=403)
    response.json.return_value = {'message': 'Resource not accessible by integration'}
    create_release.side_effect = github3.exceptions.ForbiddenError(response)

    with pytest.raises(github3.exceptions.ForbiddenError):
        roo.release(
            repository=repository,
            version_tag='v6.2.0',
        )

    delete_branch.assert_not_called()


def test_delete_release_branch(repository, delete_branch, caplog):
    assert roo.delete_release_branch(repository, 'v6.2.0')

    delete_branch.return_value = False
    with caplog.at_level(logging.WARNING):
        assert not roo.delete_release_branch(repository, 'v6.2.0')

    assert 'did not delete' in caplog.text
