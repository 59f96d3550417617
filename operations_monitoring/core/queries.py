"""
currentOp Command Builders

Builds the two administrative currentOp commands of a collection cycle and
runs them against the admin database, translating driver failures into
OperationsQueryError and undecodable replies into OperationsDecodeError.
"""

import logging
from typing import Any, Dict, Iterable

from bson.codec_options import CodecOptions
from bson.errors import BSONError
from bson.regex import Regex
from bson.son import SON
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from operations_monitoring.ops_exceptions import (
    OperationsDecodeError,
    OperationsQueryError,
    OperationsTimeoutError
)

logger = logging.getLogger(__name__)

LONGEST_QUERY = "longest query"
INDEX_BUILD = "index build"

# currentOp truncates long command strings at a byte boundary, which can split
# a multi-byte character
REPLY_CODEC_OPTIONS = CodecOptions(unicode_decode_error_handler="replace")


def build_longest_query_command(operation_kinds: Iterable[str]) -> SON:
    """currentOp restricted to the given operation kinds."""
    return SON([
        ("currentOp", 1),
        ("op", {"$in": list(operation_kinds)}),
    ])


def build_index_build_command() -> SON:
    """
    currentOp matching index builds.

    Any one of the three patterns identifies an index build:
    - a createIndexes command (older servers report the payload under
      ``query``, newer ones under ``command``)
    - an insert into a ``<db>.system.indexes`` namespace
    - an "Index Build" progress message
    """
    create_indexes = {
        "op": "command",
        "$or": [
            {"query.createIndexes": {"$exists": True}},
            {"command.createIndexes": {"$exists": True}},
        ],
    }
    system_indexes_insert = {"op": "insert", "ns": Regex(r".\.system\.indexes", "i")}
    index_build_msg = {"msg": Regex("Index Build.*", "i")}

    return SON([
        ("currentOp", 1),
        ("$or", [create_indexes, system_indexes_insert, index_build_msg]),
    ])


def run_current_op(
    client: MongoClient,
    database: str,
    command: SON,
    query_name: str
) -> Dict[str, Any]:
    """
    Run a currentOp command and return the raw response document.

    Raises:
        OperationsTimeoutError: If the cycle deadline expires
        OperationsQueryError: If the driver or the server reports an error
        OperationsDecodeError: If the reply is not decodable BSON
    """
    try:
        return client[database].command(command, codec_options=REPLY_CODEC_OPTIONS)
    except BSONError as e:
        raise OperationsDecodeError(
            f"failed to decode current operations list for {query_name} check: {e}",
            query_name=query_name
        ) from e
    except PyMongoError as e:
        if e.timeout:
            raise OperationsTimeoutError(
                f"current operations list for {query_name} check timed out: {e}",
                query_name=query_name
            ) from e
        raise OperationsQueryError(
            f"failed to get current operations list for {query_name} check: {e}",
            query_name=query_name
        ) from e
