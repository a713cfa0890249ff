from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.api.permissions import ROLE_ADMIN, ROLE_OPERATOR
from apps.catalog.models import Category, Product, ProductCategory
from apps.users.models import Role, User

ROLES = [ROLE_OPERATOR, ROLE_ADMIN]

CATEGORIES = ["Livros", "Eletrônicos", "Computadores"]

IMG_BASE = "https://raw.githubusercontent.com/devsuperior/dscatalog-resources/master/backend/img"

PRODUCTS = [
    (
        "The Lord of the Rings",
        "90.50",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
        f"{IMG_BASE}/1-big.jpg",
        ["Livros"],
    ),
    (
        "Smart TV",
        "2190.00",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
        f"{IMG_BASE}/2-big.jpg",
        ["Eletrônicos", "Computadores"],
    ),
    (
        "Macbook Pro",
        "1250.00",
        "Nulla eu imperdiet purus. Maecenas ante.",
        f"{IMG_BASE}/3-big.jpg",
        ["Computadores"],
    ),
    (
        "PC Gamer",
        "1200.00",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
        f"{IMG_BASE}/4-big.jpg",
        ["Computadores"],
    ),
    (
        "Rails for Dummies",
        "100.99",
        "Cras fringilla convallis sem vel faucibus.",
        f"{IMG_BASE}/5-big.jpg",
        ["Livros"],
    ),
    (
        "PC Gamer Ex",
        "1350.00",
        "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
        f"{IMG_BASE}/6-big.jpg",
        ["Computadores"],
    ),
]

USERS = [
    {
        "first_name": "Alex",
        "last_name": "Brown",
        "email": "alex@gmail.com",
        "password": "123456",
        "roles": [ROLE_OPERATOR],
    },
    {
        "first_name": "Maria",
        "last_name": "Green",
        "email": "maria@gmail.com",
        "password": "123456",
        "roles": [ROLE_OPERATOR, ROLE_ADMIN],
    },
]

RELEASE_DATE = datetime(2020, 7, 13, 20, 50, 7, tzinfo=dt_timezone.utc)


class Command(BaseCommand):
    help = "Seed the database with demo roles, users, categories and products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing catalog rows before seeding",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["reset"]:
            self.stdout.write("Removing existing catalog data...")
            ProductCategory.objects.all().delete()
            Product.objects.all().delete()
            Category.objects.all().delete()

        self.stdout.write("Seeding roles...")
        roles = {
            authority: Role.objects.get_or_create(authority=authority)[0]
            for authority in ROLES
        }

        self.stdout.write("Seeding categories...")
        name_to_cat = {
            name: Category.objects.get_or_create(name=name)[0] for name in CATEGORIES
        }

        self.stdout.write("Seeding products...")
        for name, price, description, img_url, cat_names in PRODUCTS:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults=dict(
                    price=Decimal(price),
                    description=description,
                    img_url=img_url,
                    date=RELEASE_DATE,
                ),
            )
            for cname in cat_names:
                ProductCategory.objects.get_or_create(
                    product=product, category=name_to_cat[cname]
                )

        self.stdout.write("Seeding users...")
        for payload in USERS:
            user = User.objects.filter(email=payload["email"]).first()
            if user is None:
                user = User.objects.create_user(
                    email=payload["email"],
                    password=payload["password"],
                    first_name=payload["first_name"],
                    last_name=payload["last_name"],
                )
            user.roles.set([roles[a] for a in payload["roles"]])

        self.stdout.write(self.style.SUCCESS("DSCatalog seed completed."))
