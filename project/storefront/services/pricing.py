# storefront/services/pricing.py

"""
Расчёт сумм заказа. Чистые функции без обращения к базе.

Правило доставки: надбавка delivery_price уже входит в цену каждой
delivery-позиции, поэтому total_amount = сумма total_price позиций,
а delivery_fee (максимальная надбавка среди delivery-позиций) хранится
только для отображения и к итогу не прибавляется.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List
from pydantic import BaseModel

from storefront.models.order import OrderType

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Приводит число к Decimal с двумя знаками (ROUND_HALF_UP)."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount) -> int:
    """Сумма в минимальных единицах валюты (pesewas для GHS)."""
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


class CartLine(BaseModel):
    food_id: str
    quantity: int
    order_type: OrderType
    price: Decimal
    delivery_price: Decimal = Decimal("0")

    @property
    def is_delivery(self) -> bool:
        return OrderType(self.order_type) == OrderType.DELIVERY


class PricedLine(BaseModel):
    food_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class OrderTotals(BaseModel):
    lines: List[PricedLine] = []
    total_amount: Decimal = Decimal("0.00")
    delivery_fee: Decimal = Decimal("0.00")
    order_type: OrderType = OrderType.PICKUP


def price_line(line: CartLine) -> PricedLine:
    unit_price = to_money(line.price)
    if line.is_delivery:
        unit_price = to_money(unit_price + to_money(line.delivery_price))
    return PricedLine(
        food_id=line.food_id,
        quantity=line.quantity,
        unit_price=unit_price,
        total_price=to_money(unit_price * line.quantity),
    )


def compute_order_totals(lines: List[CartLine]) -> OrderTotals:
    """
    Считает позиции и итоги заказа.

    :param lines: строки корзины с ценами из каталога
    :return: OrderTotals с total_amount = Σ total_price и delivery_fee = max надбавки
    :raises ValueError: пустая корзина или количество меньше 1
    """
    if not lines:
        raise ValueError("Корзина пуста")
    for line in lines:
        if line.quantity < 1:
            raise ValueError(f"Некорректное количество для {line.food_id}: {line.quantity}")

    priced = [price_line(line) for line in lines]
    delivery_prices = [to_money(line.delivery_price) for line in lines if line.is_delivery]

    return OrderTotals(
        lines=priced,
        total_amount=to_money(sum((p.total_price for p in priced), Decimal("0"))),
        delivery_fee=max(delivery_prices) if delivery_prices else Decimal("0.00"),
        order_type=OrderType.DELIVERY if delivery_prices else OrderType.PICKUP,
    )


def order_grand_total(order) -> Decimal:
    """Сумма к оплате. Единственный источник истины: delivery_fee не прибавляется."""
    return to_money(order.total_amount)


def payment_reference_for(order) -> str:
    """
    Reference платежа: совпадает с id заказа, пока шлюз не вернул другой.
    """
    return order.payment_reference or order.id
