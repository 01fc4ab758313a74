from setuptools import setup, find_packages

setup(
    name='togglPy',
    version='0.1.0',
    description='A CLI companion for starting, stopping and reviewing Toggl Track time entries.',
    packages=find_packages(exclude=['tests']),
    install_requires=[
        'requests',
        'tabulate',
        'python-dotenv',
        'markdown',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'togglpy=togglpy.__main__:main',
        ],
    },
    python_requires='>=3.7',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
)
