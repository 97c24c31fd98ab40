"""
Back-office: staff, pedidos y reportes de comisiones de vendedores
"""
