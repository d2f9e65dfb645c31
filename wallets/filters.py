import django_filters

from .models import Transaction


class TransactionFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=Transaction.TYPE_CHOICES)
    since = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")

    class Meta:
        model = Transaction
        fields = ["type", "since"]
