# sistemas/obrigacoes/exceptions.py
"""
Exceções específicas do módulo de obrigações mensais
"""


class RotinasError(Exception):
    """Erro base do módulo"""
    pass


class RotinaNaoEncontradaError(RotinasError):
    """Rotina mensal não encontrada"""
    pass


class StatusInvalidoError(RotinasError):
    """Status fora dos valores aceitos para a rotina"""
    pass


class DialetoNaoSuportadoError(RotinasError):
    """Banco sem suporte a INSERT ... ON CONFLICT DO NOTHING"""
    pass
