from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="uftp-transfer",
    version="1.0.0",
    author="thesecondfox",
    author_email="thesecondfox@users.noreply.github.com",
    description="UFTP upload orchestration for climate model output with resume, retry and MD5 verification",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/thesecondfox/uftp-transfer",
    packages=find_packages(),
    package_data={
        'uftp_transfer': ['config/*.yaml'],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Atmospheric Science",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        'dev': ['pytest>=6.0', 'black>=21.0', 'flake8>=3.9'],
    },
    entry_points={
        "console_scripts": [
            "uftp-upload=uftp_transfer.main:main",
            "uftp-check=uftp_transfer.main:check_main",
            "uftp-genconfig=uftp_transfer.main:generate_main",
        ],
    },
    keywords="uftp hpc file-transfer climate oifs fesom resume checksum",
)
