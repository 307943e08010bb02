from pathlib import Path

from setuptools import find_namespace_packages, setup

ROOT = Path(__file__).parent

# Read requirements (ignore comments and recursive -r entries)
req_path = ROOT / "requirements.txt"
requirements = []
if req_path.exists():
    for line in req_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("-r"):
            continue
        requirements.append(line)

readme = (ROOT / "README.md").read_text(encoding="utf-8") if (ROOT / "README.md").exists() else ""

setup(
    name="houseplant-care-tracker",
    version="1.0.0",
    description="Houseplant care tracker: care task scheduling and bulk plant import",
    long_description=readme,
    long_description_content_type="text/markdown",
    # Several subpackages have no __init__.py
    packages=find_namespace_packages(include=["app", "app.*", "infrastructure", "infrastructure.*"]),
    py_modules=["plantcare_app"],
    python_requires=">=3.10,<4",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Framework :: Flask",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Home Automation",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    keywords="houseplants plant-care reminders csv-import flask",
    entry_points={
        "console_scripts": [
            "plantcare-backend=plantcare_app:main",
        ]
    },
    include_package_data=True,
)
