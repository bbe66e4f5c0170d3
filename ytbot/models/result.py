"""
Result - явный результат операции: значение или доменная ошибка
Ожидаемые сбои передаются через Result, а не через исключения
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ytbot.models.errors import DomainError

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Результат операции

    Attributes:
        value: Значение при успехе
        error: DomainError при ошибке
    """
    value: Optional[T] = None
    error: Optional[DomainError] = None

    def __post_init__(self):
        if self.error is not None and self.value is not None:
            raise ValueError("Result не может одновременно содержать значение и ошибку")

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def fail(cls, error: DomainError) -> 'Result[T]':
        if error is None:
            raise ValueError("Result.fail требует DomainError")
        return cls(error=error)

    def is_ok(self) -> bool:
        """Проверка, успешна ли операция"""
        return self.error is None

    def is_error(self) -> bool:
        """Проверка, завершилась ли операция ошибкой"""
        return self.error is not None
