"""
Setup script para instalação do Portal Contábil.

Este arquivo permite instalar o projeto em modo editable para desenvolvimento:
    pip install -e .[test]

Isso adiciona o projeto ao PYTHONPATH e permite imports como:
    from sistemas.obrigacoes.services import garantir_rotinas_mensais
"""

from setuptools import setup, find_packages

setup(
    name="portal-contabil",
    version="1.0.0",
    description="Portal Contábil - Empresas, obrigações e rotinas mensais",
    packages=find_packages(exclude=["tests", "tests.*", "migrations", "migrations.*"]),
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn[standard]>=0.27",
        "sqlalchemy>=2.0",
        "psycopg2-binary>=2.9",
        "alembic>=1.13",
        "pydantic[email]>=2.5",
        "python-jose[cryptography]>=3.3",
        "bcrypt>=4.0",
        "python-multipart>=0.0.9",
        "python-dotenv>=1.0",
        "structlog>=24.1",
        "pytz>=2024.1",
        "slowapi>=0.1.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
)
