"""
Иерархия исключений приложения

Каждое исключение несет status_code - подсказку для транспортного слоя
(HTTP или бот), который сам решает, как показать ошибку пользователю.
"""


class PuntoDeAguaError(Exception):
    """Базовое исключение приложения"""

    status_code: int = 500
    public_message: str = "Error interno del servidor."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)


class ValidationError(PuntoDeAguaError):
    """Отсутствует или некорректно обязательное поле (исправляется пользователем)"""

    status_code = 400
    public_message = "Por favor, completa todos los campos obligatorios."

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)


class InvalidArgumentError(PuntoDeAguaError):
    """Аргумент вне допустимого набора значений или неверной формы"""

    status_code = 400
    public_message = "Argumento inválido."


class InvalidStatusError(InvalidArgumentError):
    """Статус заказа не входит в закрытый набор"""

    public_message = "Estado de pedido inválido."

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Недопустимый статус заказа: {value!r}")


class DuplicateIdentityError(PuntoDeAguaError):
    """Нарушение уникальности email"""

    status_code = 409
    public_message = "El correo electrónico ya está registrado."

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email уже зарегистрирован: {email}")


class InvalidCredentialsError(PuntoDeAguaError):
    """Неизвестный email или неверный пароль (намеренно неразличимы)"""

    status_code = 401
    public_message = "Credenciales inválidas."


class AccountSuspendedError(PuntoDeAguaError):
    """Аккаунт заблокирован администратором"""

    status_code = 403
    public_message = "Su cuenta ha sido suspendida. Por favor, contacte al administrador."


class EntityNotFoundError(PuntoDeAguaError):
    """Запись с указанным ID не найдена"""

    status_code = 404
    public_message = "Recurso no encontrado."

    def __init__(self, entity_type: str, entity_id: object):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} #{entity_id} not found")


class ConcurrentModificationError(PuntoDeAguaError):
    """
    Конфликт версий (optimistic locking)

    Возникает когда запись была изменена другим запросом между
    чтением и попыткой обновления.
    """

    status_code = 409
    public_message = "El pedido fue modificado por otra operación. Recargue e intente de nuevo."

    def __init__(self, entity_type: str, entity_id: int, expected_version: int | None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{entity_type} #{entity_id} was modified by another process "
            f"(expected version {expected_version}). "
            "Please reload and try again."
        )


class StorageError(PuntoDeAguaError):
    """
    Хранилище недоступно или запрос завершился ошибкой

    Детали пишутся в лог, наружу уходит только public_message.
    """

    status_code = 500
    public_message = "Error interno del servidor."

    def __init__(self, message: str | None = None, transient: bool = False):
        self.transient = transient
        super().__init__(message)


class NotificationError(PuntoDeAguaError):
    """Ошибка доставки уведомления (только логируется, наружу не выходит)"""

