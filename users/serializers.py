from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta:
        model = User
        fields = ("id", "email", "password", "date_joined")
        read_only_fields = ("id", "date_joined")

    def create(self, validated_data):
        # create_user hashes the password; the wallet is created by the post_save hook
        return User.objects.create_user(**validated_data)


# ---- Schemas for Swagger docs ----

class TokenPairSchema(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()
