"""DynamoDB-backed key-value table."""

import logging
from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import PersistenceError
from .table import Item

logger = logging.getLogger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo(item: Item) -> dict[str, Any]:
    return {k: _serializer.serialize(v) for k, v in item.items()}


def _plain(value: Any) -> Any:
    """Turn the Decimals boto3 returns for numbers back into int/float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _from_dynamo(attributes: dict[str, Any]) -> Item:
    return {k: _plain(_deserializer.deserialize(v)) for k, v in attributes.items()}


class DynamoTable:
    """
    Key-value table over a DynamoDB table with a string partition key `id`.

    `client` is a low-level boto3 DynamoDB client, built once by the caller.
    """

    def __init__(self, client, table_name: str):
        self._client = client
        self._table = table_name

    def _fail(self, action: str, error: Exception) -> PersistenceError:
        logger.error("DynamoDB %s failed on table %s: %s", action, self._table, error)
        return PersistenceError(f"Failed to {action}")

    def put_item(self, item: Item) -> None:
        try:
            self._client.put_item(TableName=self._table, Item=_to_dynamo(item))
        except (BotoCoreError, ClientError) as e:
            raise self._fail("write item", e) from e

    def get_item(self, key: str) -> Item | None:
        try:
            response = self._client.get_item(
                TableName=self._table,
                Key={"id": {"S": key}},
                ConsistentRead=True,
            )
        except (BotoCoreError, ClientError) as e:
            raise self._fail("read item", e) from e
        attributes = response.get("Item")
        return _from_dynamo(attributes) if attributes else None

    def scan(self) -> list[Item]:
        items: list[Item] = []
        params: dict[str, Any] = {"TableName": self._table}
        try:
            while True:
                response = self._client.scan(**params)
                items.extend(_from_dynamo(raw) for raw in response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                params["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as e:
            raise self._fail("scan items", e) from e
        return items

    def update_item(self, key: str, changes: Item) -> Item | None:
        fields = sorted(k for k in changes if k != "id")
        if not fields:
            raise ValueError("update_item needs at least one attribute to set")
        # Placeholders for every name: `status` and friends are reserved words.
        expression = "SET " + ", ".join(f"#{name} = :{name}" for name in fields)
        names = {f"#{name}": name for name in fields}
        names["#pk"] = "id"
        try:
            response = self._client.update_item(
                TableName=self._table,
                Key={"id": {"S": key}},
                UpdateExpression=expression,
                # Never create an item from a bare patch.
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues={
                    f":{name}": _serializer.serialize(changes[name]) for name in fields
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                logger.info("DynamoDB update skipped, item %s no longer exists", key)
                return None
            raise self._fail("update item", e) from e
        except BotoCoreError as e:
            raise self._fail("update item", e) from e
        attributes = response.get("Attributes")
        if not attributes:
            raise PersistenceError("Failed to update item")
        return _from_dynamo(attributes)

    def delete_item(self, key: str) -> None:
        try:
            self._client.delete_item(TableName=self._table, Key={"id": {"S": key}})
        except (BotoCoreError, ClientError) as e:
            raise self._fail("delete item", e) from e
