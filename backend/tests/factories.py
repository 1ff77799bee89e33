"""
Request payload builders shared by the test modules.
"""


def dealer_payload(email="dealer@test.com", **overrides):
    payload = {
        "name": "Prime Motors",
        "email": email,
        "password": "password123",
        "phone": "+254700000001",
        "whatsapp": "+254700000001",
        "location": {
            "address": "1 Ngong Road",
            "city": "Nairobi",
            "state": "Nairobi County",
            "country": "Kenya",
            "coordinates": {"latitude": -1.2921, "longitude": 36.8219},
        },
    }
    payload.update(overrides)
    return payload


def car_payload(**overrides):
    payload = {
        "name": "Toyota Corolla 1.8 XLi",
        "make": "Toyota",
        "model": "Corolla",
        "year": 2018,
        "transmission": "Automatic",
        "engineSize": "1.8L",
        "condition": "Used",
        "price": 15000,
        "mileage": 42000,
        "fuelType": "Petrol",
        "bodyType": "Sedan",
        "color": "Silver",
        "features": ["Air Conditioning", "Reverse Camera"],
        "images": [],
    }
    payload.update(overrides)
    return payload


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
