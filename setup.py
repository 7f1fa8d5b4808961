# https://packaging.python.org/en/latest/
# https://packaging.python.org/en/latest/guides/modernize-setup-py-project/
from packaging.version import Version
from pathlib import Path
import re
from setuptools import setup, find_packages


this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

# version must be in X.X.X format, e.g., "0.0.3dev"
text = (this_directory / 'lingplot' / '__init__.py').read_text()
match = re.search(r"__version__ = '([.\w]+)'", text)
if match is None:
    raise ValueError("No valid version string found in:\n\n" + text)
version = match.group(1)
Version(version)  # check that it's a valid version

setup(
    name='lingplot',
    version=version,
    description="Project layout and plotting tools for psycholinguistics courses",
    author="Christian Brodbeck",
    author_email='christianbrodbeck@nyu.edu',
    license='BSD (3-clause)',
    long_description=long_description,
    long_description_content_type='text/markdown',
    python_requires='>=3.8',
    setup_requires=[
        "packaging",
    ],
    install_requires=[
        'colormath >= 2.1',
        'matplotlib >= 3.6',
        'numpy >= 1.20',
        'pandas >= 1.3',
        'scipy >= 1.5',
        'statsmodels >= 0.13',
        'tqdm >= 4.40',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    packages=find_packages(exclude=['examples', 'examples.*']),
    entry_points={
        'console_scripts': [
            'lingplot = lingplot.__main__:main',
        ],
    },
)
