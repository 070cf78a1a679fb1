import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def _requirements(fname: str):
    with open(os.path.join(own_dir, fname)) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            yield line


def requirements():
    yield from _requirements('requirements.txt')


def test_requirements():
    yield from _requirements('requirements.test.txt')


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='release-orchestrator',
    version=version(),
    description='Release-Automation (release-notes, release-pullrequests, releases) for GitHubActions',
    long_description='Release-Automation (release-notes, release-pullrequests, releases) for GitHubActions',
    long_description_content_type='text/markdown',
    python_requires='>=3.11',
    py_modules=(),
    packages=(
        'ci',
        'ghapi',
        'release_orchestrator',
    ),
    install_requires=list(requirements()),
    extras_require={
        'test': list(test_requirements()),
    },
    entry_points={
        'console_scripts': [
            'release-orchestrator = release_orchestrator.__main__:main'
        ],
    },
)
