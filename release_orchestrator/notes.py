import release_orchestrator.model as rom


def strip_release_pr_lines(
    release_notes: str,
    marker: str=rom.RELEASE_PR_MARKER,
) -> str:
    '''
    removes all lines mentioning release-pullrequests (`[Release] v..`), which GitHub's
    release-notes-generator picks up from the release-pullrequest's merge-commit. All other
    lines (including empty ones) are kept as they are.
    '''
    return '\n'.join(
        line for line in release_notes.split('\n')
        if marker not in line
    )
