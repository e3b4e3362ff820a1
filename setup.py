"""Install the Ki blog application."""

from setuptools import setup, find_packages

setup(
    name='ki',
    version='0.1.0',
    packages=find_packages(include=['ki', 'ki.*'],
                           exclude=['*.tests', '*.tests.*']),
    package_data={'ki': ['config.py']},
    python_requires='>=3.8',
    install_requires=[
        "flask>=2.2",
        "flask-sqlalchemy>=3.0",
        "sqlalchemy>=1.4",
        "wtforms>=3.0",
        "werkzeug>=2.2",
        "pytz",
        "python-json-logger",
    ],
    extras_require={
        'test': [
            "pytest",
            "hypothesis",
        ],
    },
    zip_safe=False
)
