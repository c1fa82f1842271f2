from setuptools import setup, find_packages

setup(
    name='graph-console',
    version='1.0.0',
    description='Interactive console for graph databases',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'prompt_toolkit>=3.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'graph_console.driver': [
            'memory = memory_driver.plugin:MemoryDriverPlugin',
        ],
        'console_scripts': [
            'graph-console = graph_console.main:main',
        ],
    },
    python_requires='>=3.9',
)
