"""
State Machine для валидации переходов статусов заказов
"""

from dataclasses import dataclass

from puntodeagua.core.constants import OrderStatus, UserRole
from puntodeagua.core.exceptions import InvalidStatusError, PuntoDeAguaError


class InvalidStateTransitionError(PuntoDeAguaError):
    """Исключение при попытке недопустимого перехода статуса"""

    status_code = 409
    public_message = "Cambio de estado no permitido."

    def __init__(self, from_state: str, to_state: str, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        message = f"Недопустимый переход из '{from_state}' в '{to_state}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


@dataclass
class OrderStateTransitionResult:
    """Результат валидации перехода статуса"""

    is_valid: bool
    target: OrderStatus | None = None
    error_message: str | None = None
    warnings: list[str] | None = None


class OrderStateMachine:
    """
    State Machine для управления жизненным циклом заказа

    Граф переходов:

    PENDING → ACCEPTED → IN_PROCESS → IN_TRANSIT → DELIVERED
       ↓          ↓           ↓            ↓
    REJECTED  REJECTED    REJECTED     REJECTED

    В строгом режиме (strict=True) граф проверяется перед сохранением.
    В разрешающем режиме допустим переход между любыми статусами из
    закрытого набора - так работали существующие клиенты распределителей.
    """

    TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
        OrderStatus.PENDING: {
            OrderStatus.ACCEPTED,  # Распределитель принял заказ
            OrderStatus.REJECTED,  # Отказ (или отмена клиентом)
        },
        OrderStatus.ACCEPTED: {
            OrderStatus.IN_PROCESS,
            OrderStatus.REJECTED,
        },
        OrderStatus.IN_PROCESS: {
            OrderStatus.IN_TRANSIT,
            OrderStatus.REJECTED,
        },
        OrderStatus.IN_TRANSIT: {
            OrderStatus.DELIVERED,
            OrderStatus.REJECTED,
        },
        OrderStatus.DELIVERED: set(),  # Терминальное состояние
        OrderStatus.REJECTED: set(),  # Терминальное состояние
    }

    # Кто может выполнять переход; переходы без записи доступны DISTRIBUTOR и ADMIN
    STAFF_ROLES: frozenset[UserRole] = frozenset({UserRole.DISTRIBUTOR, UserRole.ADMIN})
    ROLE_PERMISSIONS: dict[tuple[OrderStatus, OrderStatus], frozenset[UserRole]] = {
        # Клиент может отменить свой заказ, пока его не приняли
        (OrderStatus.PENDING, OrderStatus.REJECTED): frozenset(
            {UserRole.CUSTOMER, UserRole.DISTRIBUTOR, UserRole.ADMIN}
        ),
    }

    def __init__(self, strict: bool = True):
        """
        Args:
            strict: Проверять граф переходов (False - любой статус из любого)
        """
        self.strict = strict

    @staticmethod
    def parse_status(value: "str | OrderStatus | None") -> OrderStatus:
        """
        Разбор статуса из внешнего ввода

        Raises:
            InvalidStatusError: Статус вне закрытого набора
        """
        try:
            return OrderStatus.parse(value)
        except ValueError:
            raise InvalidStatusError(value) from None

    @classmethod
    def can_transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> bool:
        """
        Проверка возможности перехода по графу

        Args:
            from_state: Текущий статус
            to_state: Целевой статус

        Returns:
            True если переход допустим
        """
        if from_state == to_state:
            return True  # Переход в тот же статус всегда допустим (idempotent)

        return to_state in cls.TRANSITIONS.get(from_state, set())

    @classmethod
    def allowed_roles(cls, from_state: OrderStatus, to_state: OrderStatus) -> frozenset[UserRole]:
        """Роли, которым разрешен переход"""
        return cls.ROLE_PERMISSIONS.get((from_state, to_state), cls.STAFF_ROLES)

    def validate_transition(
        self,
        from_state: "str | OrderStatus",
        to_state: "str | OrderStatus",
        actor_role: UserRole | None = None,
        raise_exception: bool = True,
    ) -> OrderStateTransitionResult:
        """
        Валидация перехода статуса с проверкой прав

        Args:
            from_state: Текущий статус заказа
            to_state: Целевой статус (строка с внешнего ввода или OrderStatus)
            actor_role: Роль выполняющего переход (None - без проверки прав)
            raise_exception: Выбрасывать ли исключение при ошибке графа/прав

        Returns:
            OrderStateTransitionResult с результатом валидации

        Raises:
            InvalidStatusError: Целевой статус вне закрытого набора (всегда)
            InvalidStateTransitionError: Если переход недопустим и raise_exception=True
        """
        current = self.parse_status(from_state)
        target = self.parse_status(to_state)

        if current == target:
            return OrderStateTransitionResult(
                is_valid=True,
                target=target,
                warnings=["Переход в тот же статус (idempotent)"],
            )

        warnings: list[str] = []
        if not self.can_transition(current, target):
            allowed = self.TRANSITIONS.get(current, set())
            if allowed:
                allowed_names = ", ".join(sorted(s.value for s in allowed))
                error_msg = (
                    f"Переход из '{current.value}' в '{target.value}' недопустим. "
                    f"Допустимые переходы: {allowed_names}"
                )
            else:
                error_msg = f"Статус '{current.value}' является терминальным"

            if self.strict:
                if raise_exception:
                    raise InvalidStateTransitionError(current.value, target.value, error_msg)
                return OrderStateTransitionResult(
                    is_valid=False, target=target, error_message=error_msg
                )
            warnings.append(f"Разрешающий режим: {error_msg}")

        if actor_role is not None:
            required_roles = self.allowed_roles(current, target)
            if actor_role not in required_roles:
                role_names = ", ".join(sorted(role.value for role in required_roles))
                error_msg = (
                    f"Недостаточно прав для перехода из '{current.value}' в '{target.value}'. "
                    f"Требуется одна из ролей: {role_names}"
                )
                if raise_exception:
                    raise InvalidStateTransitionError(current.value, target.value, error_msg)
                return OrderStateTransitionResult(
                    is_valid=False, target=target, error_message=error_msg
                )

        return OrderStateTransitionResult(is_valid=True, target=target, warnings=warnings or None)

    def get_available_transitions(
        self, from_state: OrderStatus, actor_role: UserRole | None = None
    ) -> list[OrderStatus]:
        """
        Получение списка доступных переходов из текущего статуса

        Args:
            from_state: Текущий статус
            actor_role: Роль для фильтрации по правам

        Returns:
            Список доступных статусов (в порядке жизненного цикла)
        """
        if self.strict:
            candidates = self.TRANSITIONS.get(from_state, set())
        else:
            candidates = set(OrderStatus.all_statuses()) - {from_state}

        available = [s for s in OrderStatus.all_statuses() if s in candidates]
        if actor_role is None:
            return available
        return [s for s in available if actor_role in self.allowed_roles(from_state, s)]

    @classmethod
    def is_terminal_state(cls, state: OrderStatus) -> bool:
        """
        Проверка, является ли статус терминальным

        Returns:
            True если из этого статуса нельзя никуда перейти
        """
        return len(cls.TRANSITIONS.get(state, set())) == 0
