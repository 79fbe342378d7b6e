"""
Punto de Agua - сервис заказов бутилированной воды с доставкой
"""

__version__ = "1.0.0"
