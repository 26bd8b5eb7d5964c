"""Setup configuration for huectl."""

from setuptools import setup, find_namespace_packages


setup(
    name="huectl",
    version="0.1.0",
    description="Control Philips Hue lights from the command line",
    license="MIT",
    packages=find_namespace_packages(include=['huectl', 'huectl.*', 'config']),
    py_modules=['main'],
    install_requires=[
        'numpy>=1.24.0',
        'requests>=2.28.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'huectl=main:main',
        ],
    },
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Console',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Home Automation',
    ],
)
