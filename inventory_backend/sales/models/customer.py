# sales/models/customer.py

import uuid

from django.db import models


class Customer(models.Model):
    """
    Buyer on a sales order.
    """

    TYPE_REGULAR = "regular"
    TYPE_WHOLESALE = "wholesale"

    TYPE_CHOICES = [
        (TYPE_REGULAR, "Regular"),
        (TYPE_WHOLESALE, "Wholesale"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")

    customer_type = models.CharField(
        max_length=20,
        choices=TYPE_CHOICES,
        default=TYPE_REGULAR,
    )
    store_name = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
