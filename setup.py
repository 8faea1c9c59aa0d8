from setuptools import setup

setup(
    name='chatmark',
    version='0.1.0',
    description='Rule-driven parser for chat-flavored markdown',
    license='MIT',
    packages=['chatmark'],
    python_requires='>=3.10',
    install_requires=[
        'typing_extensions>=4.4',
    ],
    extras_require={
        'test': [
            'pytest',
            'sybil',
        ],
    },
    entry_points={
        'console_scripts': [
            'chatmark = chatmark.cli:run',
        ],
    },
)
