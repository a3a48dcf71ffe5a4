import functools
import json
import os
import time
from decimal import Decimal
from random import uniform

import boto3 as boto3
from botocore.exceptions import ClientError

from chalicelib.utils import exceptions
from chalicelib.utils.boto_clients import aws_config_ddb
from chalicelib.utils.logger import logger, log_exception

# For safe db operations
RETRY_EXCEPTIONS = ('ProvisionedThroughputExceededException', 'ThrottlingException')
need_return_capacity = ('put_item', 'get_item', 'update_item', 'delete_item')

_DB = None


def exp_db_backoff(func):
    """
        should be used for any atomic
        get/put item in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        max_retries = 15
        timeout_seed = uniform(0.1, 0.99)

        for retries in range(max_retries):
            try:
                if func.__name__ in need_return_capacity:
                    kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
                else:
                    raise RuntimeError("This decorator only for DynamoDB methods")
                result = func(*args, **kwargs)
                logger.info(f'{func.__name__}:: SUCCESS')

                return result

            except ClientError as e:
                if e.response.get('Error', {}).get('Code') not in RETRY_EXCEPTIONS:
                    log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
                    raise
                logger.warning(f'{func.__name__}:: throttled, retry number {retries + 1}')
                time.sleep(timeout_seed * 2 ** min(retries, 5) / 10)

        raise exceptions.NumberOfRetriesExceeded(
            f"MaxNumber={max_retries} of DB retries has exceeded"
        )

    return wrapper


def get_table(table_name: str):
    global _DB
    if _DB is None:
        if os.environ.get('ENDPOINT_URL'):
            table = boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL')).Table(table_name)
        else:
            table = boto3.resource('dynamodb', config=aws_config_ddb).Table(table_name)

        table.put_item = exp_db_backoff(table.put_item)
        table.get_item = exp_db_backoff(table.get_item)
        table.update_item = exp_db_backoff(table.update_item)
        table.delete_item = exp_db_backoff(table.delete_item)
        _DB = table

    return _DB


def get_gen_table():
    return get_table(os.environ.get('GEN_TABLE_NAME', 'restora'))


def to_db_item(item: dict) -> dict:
    """ DynamoDB rejects floats, so every float becomes Decimal """
    return json.loads(json.dumps(item), parse_float=Decimal)


def from_db_item(item: dict) -> dict:
    """ Turn Decimals back into int/float so records look the same as in memory """

    def convert(value):
        if isinstance(value, Decimal):
            return int(value) if value == value.to_integral_value() else float(value)
        if isinstance(value, list):
            return [convert(v) for v in value]
        if isinstance(value, dict):
            return {k: convert(v) for k, v in value.items()}
        return value

    return convert(item)


def put_db_record(item: dict, condition=None, table=get_gen_table):
    kwargs = {'Item': to_db_item(item)}
    if condition is not None:
        kwargs['ConditionExpression'] = condition
    table().put_item(**kwargs)


def delete_db_record(key: dict, table=get_gen_table):
    table().delete_item(Key=key)


def update_db_record(key: dict, update_body: dict, allowed_attrs_to_update: list, table=get_gen_table):
    set_expr, expr_attr_values, expr_attr_names = generate_update_expression(
        update_body=to_db_item(update_body),
        allowed_attrs_to_update=allowed_attrs_to_update
    )
    if not set_expr:
        return None
    return table().update_item(
        Key=key,
        ReturnValues='ALL_NEW',
        UpdateExpression=set_expr,
        ExpressionAttributeValues=expr_attr_values,
        ExpressionAttributeNames=expr_attr_names
    )


def generate_update_expression(update_body: dict, allowed_attrs_to_update: list):
    """
    Generate the SET expression for the allowed attributes present in update_body
    Attribute names are always aliased, 'name', 'status' and 'time' are DynamoDB reserved words
    """
    expr_attr_values = {}
    expr_attr_names = {}
    set_expr = 'SET '
    for field in allowed_attrs_to_update:
        field_value = update_body.get(field, None)
        if field_value is None:
            continue
        expr_attr_names[f'#{field}'] = field
        expr_attr_values[f':{field}'] = field_value
        set_expr += f'#{field}=:{field}, '

    if set_expr == 'SET ':
        return None, None, expr_attr_names
    return set_expr[:-2], expr_attr_values, expr_attr_names


def get_db_item(partkey, sortkey, table=get_gen_table):
    result = table().get_item(
        Key={
            'partkey': partkey,
            'sortkey': sortkey
        }
    )

    if result.__contains__('Item'):
        return result['Item']
    else:
        logger.warning(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
        raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')


def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_expression=None,
        table=get_gen_table,
        index_name=None,
        expr_attr_names=None,
        limit=None,
        start_key=None
):
    kwargs = {'KeyConditionExpression': key_condition_expression}
    if filter_expression:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_expression:
        kwargs.update({'ProjectionExpression': projection_expression})

    if expr_attr_names:
        kwargs.update({'ExpressionAttributeNames': expr_attr_names})

    if limit:
        kwargs.update({'Limit': int(limit)})

    if index_name:
        kwargs.update({'IndexName': index_name})

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_expression=None,
                      table=get_gen_table, index_name=None, expr_attr_names=None):
    """ This method shall be used whenever you think the query will
        return more than 1mb of data at once"""
    all_items = []
    items, last_evaluated_key = query_items_paginated(
        key_condition_expression,
        filter_expression=filter_expression,
        projection_expression=projection_expression,
        table=table,
        index_name=index_name,
        expr_attr_names=expr_attr_names
    )
    all_items.extend(items)

    while last_evaluated_key is not None:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_expression=projection_expression,
            table=table,
            index_name=index_name,
            expr_attr_names=expr_attr_names,
            start_key=last_evaluated_key
        )
        all_items.extend(items)

    return all_items
