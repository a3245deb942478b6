from setuptools import setup, find_packages

setup(
    name='danworld',
    version='0.1.0',
    author='Danny',
    description='Decode .dan voxel world exports - chunks, block properties and extras',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['danworld', 'danworld.*']),
    install_requires=[
        'numpy>=1.20.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'danworld=danworld.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'License :: Other/Proprietary License',
        'Operating System :: OS Independent',
        'Topic :: Games/Entertainment',
        'Topic :: File Formats',
    ],
    python_requires='>=3.8',
    include_package_data=True,
    package_data={
        'danworld': ['py.typed'],
    },
)
