from django.db import models


class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        db_table = "tb_category"

    def __str__(self):
        return self.name


class Product(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    img_url = models.TextField(blank=True, default="")
    date = models.DateTimeField(null=True, blank=True)
    categories = models.ManyToManyField(
        Category, related_name="products", through="ProductCategory"
    )

    class Meta:
        db_table = "tb_product"
        indexes = [
            models.Index(fields=["name"], name="product_name_idx"),
        ]

    def __str__(self):
        return self.name


class ProductCategory(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE)
    # A category still attached to a product cannot be deleted.
    category = models.ForeignKey(Category, on_delete=models.PROTECT)

    class Meta:
        db_table = "tb_product_category"
        unique_together = ("product", "category")
