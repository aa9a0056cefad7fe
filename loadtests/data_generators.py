"""Faker-based data generators for Locust load test scenarios.

Payloads use the camelCase keys the API's request schemas accept and stay
within the domain's validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def email() -> str:
    return f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def product_data(stock_range=(20, 200)) -> dict:
    """CreateProductRequest payload for a SIMPLE product."""
    regular_price = round(random.uniform(5.0, 500.0), 2)
    offering = {
        "regularPrice": regular_price,
        "stock": random.randint(*stock_range),
        "photos": [fake.image_url()],
    }
    if random.random() < 0.3:
        offering["salePrice"] = round(regular_price * random.uniform(0.5, 0.95), 2)
    return {
        "name": fake.catch_phrase()[:255],
        "productType": "SIMPLE",
        "offerings": [offering],
    }


def offering_patch() -> dict:
    """OfferingPatch payload that shifts price or stock under shoppers' feet."""
    if random.random() < 0.5:
        return {"regularPrice": round(random.uniform(5.0, 500.0), 2)}
    return {"stock": random.randint(0, 10)}


def address_data() -> dict:
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postalCode": fake.zipcode()[:20],
        "country": "US",
    }


def place_order_data() -> dict:
    payload = {
        "shippingAddress": address_data(),
        "paymentMethod": random.choice(["CASH_ON_DELIVERY", "CREDIT_CARD", "PAYPAL", "BANK_TRANSFER"]),
    }
    if random.random() < 0.2:
        payload["billingAddress"] = address_data()
    if random.random() < 0.3:
        payload["notes"] = fake.sentence()[:500]
    return payload
