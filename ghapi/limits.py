'''
limits for github-api

stolen from: https://github.com/dead-claudia/github-limits

limits refer to amount of codepoints (tested empirically for some samples).
'''

pullrequest_body = 262144
release_body = 125000


def fits(
    value: str | bytes,
    /,
    limit: int,
) -> bool:
    return len(value) <= limit


def body_or_replacement(
    body: str,
    limit: int,
    replacement: str='body was too large (limit: {limit} / actual: {actual})',
) -> tuple[str, bool]:
    '''
    checks whether given body is short enough to be accepted by GitHub's API. If so, passed body
    will be returned as first element of returned tuple, else replacement value (formatted w/
    `limit` and `actual` length).

    The second value of returned tuple will indicate whether original body was returned.
    '''
    if fits(body, limit=limit):
        return body, True

    return replacement.format(
        limit=limit,
        actual=len(body),
    ), False
