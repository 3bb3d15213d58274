# sistemas/obrigacoes/__init__.py
"""
Obrigações mensais e geração de rotinas por competência.

- Catálogo de obrigações com a tabela de vencimento por mês
- Geração idempotente de uma rotina por (empresa, obrigação, competência)
- Agendador periódico para a virada de competência
"""
