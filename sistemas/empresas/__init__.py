# sistemas/empresas/__init__.py
"""
Cadastro de empresas clientes e atribuição de obrigações.
"""
