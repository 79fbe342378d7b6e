"""
Presenters - модуль для форматирования текста и данных для отображения

Presenters отвечают за преобразование данных из моделей в текст для пользователя.
"""

from puntodeagua.presenters.order_presenter import OrderPresenter


__all__ = ["OrderPresenter"]
