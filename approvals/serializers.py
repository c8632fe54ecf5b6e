from rest_framework import serializers

from approvals.utils import TRANSACTION_MODELS


class PendingTransactionSerializer(serializers.Serializer):
    kind = serializers.CharField()
    reference = serializers.CharField()
    label = serializers.CharField()
    member_no = serializers.CharField()
    member_name = serializers.CharField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    description = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()


class TransactionKeySerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=list(TRANSACTION_MODELS))
    reference = serializers.CharField()


class RejectTransactionSerializer(TransactionKeySerializer):
    reason = serializers.CharField()


class BulkApproveSerializer(serializers.Serializer):
    items = TransactionKeySerializer(many=True, allow_empty=False)


class BulkRejectSerializer(BulkApproveSerializer):
    reason = serializers.CharField()
