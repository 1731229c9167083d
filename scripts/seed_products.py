"""Seed the configured database with random catalog products."""
import random
import sys

from app.database import Base, SessionLocal, engine
from app.services.product_repository import ProductRepository

CATEGORIES = [
    "Electronics",
    "Clothing",
    "Home & Garden",
    "Sports",
    "Books",
    "Toys",
    "Beauty",
    "Office Supplies",
]

ADJECTIVES = ["Premium", "Compact", "Portable", "Heavy-Duty", "Eco-Friendly", "Smart"]

NOUNS = ["Widget", "Gadget", "Tool", "Kit", "Accessory", "Component"]


def random_product() -> dict:
    category = random.choice(CATEGORIES)
    adjective = random.choice(ADJECTIVES)
    noun = random.choice(NOUNS)
    return {
        "name": f"{adjective} {category} {noun}",
        "description": f"A {adjective.lower()} {noun.lower()} for {category.lower()}.",
        "price": round(random.uniform(1, 500), 2),
        "category": category,
        "in_stock": random.random() > 0.2,
    }


def seed(count: int) -> None:
    """
    Insert `count` random products.

    Args:
        count: Number of products to create
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        repository = ProductRepository(db)
        for i in range(count):
            repository.create(random_product())
            if (i + 1) % 100 == 0:
                print(f"Created {i + 1:,} products...")
    finally:
        db.close()

    print(f"✅ Successfully seeded {count:,} products")


def main():
    """Main function to parse arguments and seed products."""
    if len(sys.argv) < 2:
        print("Usage: python -m scripts.seed_products <count>")
        print("Example: python -m scripts.seed_products 250")
        sys.exit(1)

    seed(int(sys.argv[1]))


if __name__ == "__main__":
    main()
