from setuptools import setup, find_packages
setup(
    name='envs-var-validator',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    description='Validated environment configuration module with a post-install helper.',
    author='Your Name',
    author_email='youremail@example.com',
    python_requires='>=3.11',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'pydantic>=2.0.0',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        # Requirements of the copied envs module; the installer adds these to host projects.
        'envs': [
            'pydantic>=2.0.0',
            'python-dotenv>=1.0.0',
        ],
        'test': [
            'pytest>=7.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'envs-var-validator = envs_var_validator.cli:main',
        ],
    },
)
