"""
Node Client - queries, range pagers, and transaction entry points.

Plain queries forward a request object to the node and return its result
unchanged.  Every "list X" query returns a ``RangePager`` instead of a
single response.  Each single-operation call (``transfer``, ``vote``, ...)
builds a one-operation transaction and submits it immediately, waiting
for the result; batch several operations with ``new_transaction()``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from ..sigil.crypto import DEFAULT_SIGNATURE_SCHEME
from ..spec.models import ChainStateSnapshot, SignedTransaction
from ..spec.operations import (
    AccountCreate,
    BpVote,
    ContractApply,
    ConvertVest,
    Follow,
    Operation,
    Post,
    Reply,
    Stake,
    Transfer,
    TransferToVest,
    UnStake,
    Vote,
)
from .pages import DEFAULT_PAGE_SIZE, MAX_TIMESTAMP, MIN_TIMESTAMP, RangePager, list_items
from .rpc import NodeRpc
from .tx import TransactionPipeline


class NodeClient:
    """
    Client acting on behalf of one account (or none, for read-only use).

    Args:
        rpc: Node connection
        signing_key: Private key used for every transaction this client submits
        scheme: Signature scheme selector
    """

    def __init__(
        self,
        rpc: NodeRpc,
        signing_key: Optional[str] = None,
        scheme: int = DEFAULT_SIGNATURE_SCHEME,
    ) -> None:
        self.rpc = rpc
        self.signing_key = signing_key
        self.scheme = scheme

    # ============ Transactions ============

    def new_transaction(self) -> TransactionPipeline:
        """Start an explicit multi-operation transaction."""
        return TransactionPipeline(self.rpc, self.signing_key, scheme=self.scheme)

    def sign_and_broadcast(self, operations: Iterable[Operation], wait_for_result: bool = True) -> dict[str, Any]:
        pipeline = self.new_transaction()
        for op in operations:
            pipeline.add_operation(op)
        return pipeline.finalize_and_submit(wait_for_result)

    def broadcast_trx(self, signed: SignedTransaction, wait_for_result: bool = True) -> dict[str, Any]:
        """Broadcast an already signed transaction."""
        return self.rpc.broadcast_trx(signed, only_deliver=not wait_for_result)

    def _submit(self, op: Operation) -> dict[str, Any]:
        return self.new_transaction().add_operation(op).finalize_and_submit(True)

    def account_create(self, creator: str, new_account: str, fee: int, owner: str, json_metadata: str = "") -> dict[str, Any]:
        return self._submit(AccountCreate(creator, new_account, fee, owner, json_metadata))

    def transfer(self, sender: str, receiver: str, amount: int, memo: str = "") -> dict[str, Any]:
        return self._submit(Transfer(sender, receiver, amount, memo))

    def transfer_to_vest(self, sender: str, receiver: str, amount: int, memo: str = "") -> dict[str, Any]:
        return self._submit(TransferToVest(sender, receiver, amount, memo))

    def convert_vest(self, sender: str, amount: int) -> dict[str, Any]:
        return self._submit(ConvertVest(sender, amount))

    def bp_vote(self, voter: str, block_producer: str, cancel: bool = False) -> dict[str, Any]:
        return self._submit(BpVote(voter, block_producer, cancel))

    def follow(self, follower: str, followee: str, cancel: bool = False) -> dict[str, Any]:
        return self._submit(Follow(follower, followee, cancel))

    def post(self, uuid: int, owner: str, title: str, content: str, tags: Iterable[str] = ()) -> dict[str, Any]:
        return self._submit(Post(uuid, owner, title, content, tuple(tags)))

    def reply(self, uuid: int, owner: str, content: str, parent_uuid: int) -> dict[str, Any]:
        return self._submit(Reply(uuid, owner, content, parent_uuid))

    def vote(self, voter: str, idx: int) -> dict[str, Any]:
        return self._submit(Vote(voter, idx))

    def stake(self, sender: str, receiver: str, amount: int) -> dict[str, Any]:
        return self._submit(Stake(sender, receiver, amount))

    def un_stake(self, creditor: str, debtor: str, amount: int) -> dict[str, Any]:
        return self._submit(UnStake(creditor, debtor, amount))

    def contract_apply(
        self, caller: str, owner: str, contract: str, method: str, params: str = "[]", amount: int = 0
    ) -> dict[str, Any]:
        return self._submit(ContractApply(caller, owner, contract, method, params, amount))

    # ============ Queries ============

    def get_chain_state(self) -> dict[str, Any]:
        return self.rpc.get_chain_state()

    def get_snapshot(self) -> ChainStateSnapshot:
        return ChainStateSnapshot.from_dict(self.rpc.get_chain_state())

    def get_statistics_info(self) -> dict[str, Any]:
        return self.rpc.call("getStatisticsInfo")

    def get_account_by_name(self, account_name: str) -> dict[str, Any]:
        return self.rpc.call("getAccountByName", {"account_name": account_name})

    def get_account_reward_by_name(self, account_name: str) -> dict[str, Any]:
        return self.rpc.call("getAccountRewardByName", {"account_name": account_name})

    def get_account_cashout(self, account_name: str, post_id: int) -> dict[str, Any]:
        return self.rpc.call("getAccountCashout", {"account_name": account_name, "post_id": post_id})

    def get_block_cashout(self, block_height: int) -> dict[str, Any]:
        return self.rpc.call("getBlockCashout", {"block_height": block_height})

    def get_follow_count_by_name(self, account_name: str) -> dict[str, Any]:
        return self.rpc.call("getFollowCountByName", {"account_name": account_name})

    def get_block_list(self, start_block_num: int, end_block_num: int, count: int) -> dict[str, Any]:
        return self.rpc.call(
            "getBlockList",
            {"start": start_block_num, "end": end_block_num, "limit": count},
        )

    def get_signed_block(self, block_num: int) -> dict[str, Any]:
        return self.rpc.call("getSignedBlock", {"start": block_num})

    def get_trx_info_by_id(self, trx_id: str) -> dict[str, Any]:
        return self.rpc.call("getTrxInfoById", {"trx_id": trx_id})

    def get_blk_is_irreversible_by_tx_id(self, trx_id: str) -> dict[str, Any]:
        return self.rpc.call("getBlkIsIrreversibleByTxId", {"trx_id": trx_id})

    def get_post_info_by_id(self, post_id: int) -> dict[str, Any]:
        return self.rpc.call(
            "getPostInfoById",
            {"post_id": post_id, "reply_list_limit": 100, "voter_list_limit": 100},
        )

    def get_post_list_by_created(self, start_timestamp: int, end_timestamp: int, count: int) -> dict[str, Any]:
        return self.rpc.call(
            "getPostListByCreated",
            {"start": {"created": start_timestamp}, "end": {"created": end_timestamp}, "limit": count},
        )

    def get_reply_list_by_post_id(
        self, parent_id: int, start_timestamp: int, end_timestamp: int, count: int
    ) -> dict[str, Any]:
        return self.rpc.call(
            "getReplyListByPostId",
            {
                "start": {"parent_id": parent_id, "created": start_timestamp},
                "end": {"parent_id": parent_id, "created": end_timestamp},
                "limit": count,
            },
        )

    def get_contract_info(self, owner: str, contract: str) -> dict[str, Any]:
        return self.rpc.call(
            "getContractInfo",
            {"owner": owner, "contract_name": contract, "fetch_abi": True, "fetch_code": True},
        )

    def query_table_content(
        self, owner: str, contract: str, table: str, field: str, begin: str, count: int, reverse: bool
    ) -> dict[str, Any]:
        return self.rpc.call(
            "queryTableContent",
            {
                "owner": owner,
                "contract": contract,
                "table": table,
                "field": field,
                "begin": begin,
                "count": count,
                "reverse": reverse,
            },
        )

    def trx_stat_by_hour(self, hours: int = 24) -> dict[str, Any]:
        return self.rpc.call("trxStatByHour", {"hours": hours})

    # ============ Range pagers ============

    def _range_pager(
        self,
        method: str,
        items_field: str,
        cursor_field: str,
        order_key: Callable[[Any], Any],
        start: Any = None,
        end: Any = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        extra: Optional[dict[str, Any]] = None,
    ) -> RangePager:
        extract = list_items(items_field)

        def fetch(start: Any, end: Any, limit: int, last_seen: Any) -> list[Any]:
            request: dict[str, Any] = dict(extra or {})
            if start is not None:
                request["start"] = start
            if end is not None:
                request["end"] = end
            request["limit"] = limit
            if last_seen is not None:
                request[cursor_field] = last_seen
            return extract(self.rpc.call(method, request))

        return RangePager(fetch, order_key, start=start, end=end, page_size=page_size)

    def get_follower_list_by_name(self, account_name: str, page_size: int = DEFAULT_PAGE_SIZE) -> RangePager:
        """Followers of an account, newest follow-ship first."""
        return self._range_pager(
            "getFollowerListByName",
            "follower_list",
            "last_order",
            lambda item: item["create_order"],
            start={"account": account_name, "created_time": MIN_TIMESTAMP},
            end={"account": account_name, "created_time": MAX_TIMESTAMP},
            page_size=page_size,
        )

    def get_following_list_by_name(self, account_name: str, page_size: int = DEFAULT_PAGE_SIZE) -> RangePager:
        """Accounts followed by an account, newest follow-ship first."""
        return self._range_pager(
            "getFollowingListByName",
            "following_list",
            "last_order",
            lambda item: item["create_order"],
            start={"account": account_name, "created_time": MIN_TIMESTAMP},
            end={"account": account_name, "created_time": MAX_TIMESTAMP},
            page_size=page_size,
        )

    def get_witness_list(self, page_size: int = DEFAULT_PAGE_SIZE) -> RangePager:
        """Block producers in ascending order of account name."""
        # the witness endpoint takes its cursor as "start"
        return self._range_pager(
            "getWitnessList",
            "witness_list",
            "start",
            lambda item: item["owner"],
            page_size=page_size,
        )

    def get_account_list_by_balance(
        self, min_balance: int, max_balance: int, page_size: int = DEFAULT_PAGE_SIZE
    ) -> RangePager:
        """Accounts with ``min_balance <= balance < max_balance``, richest first."""
        return self._range_pager(
            "getAccountListByBalance",
            "list",
            "last_account",
            lambda item: item["info"],
            start={"value": min_balance},
            end={"value": max_balance},
            page_size=page_size,
        )

    def get_account_list_by_cre_time(
        self, start_timestamp: int, end_timestamp: int, page_size: int = DEFAULT_PAGE_SIZE
    ) -> RangePager:
        return self._range_pager(
            "getAccountListByCreTime",
            "list",
            "last_account",
            lambda item: item["info"],
            start={"utc_seconds": start_timestamp},
            end={"utc_seconds": end_timestamp},
            page_size=page_size,
        )

    def get_daily_total_trx_info(self, page_size: int = DEFAULT_PAGE_SIZE) -> RangePager:
        return self._range_pager(
            "getDailyTotalTrxInfo",
            "list",
            "last_info",
            lambda item: item,
            page_size=page_size,
        )

    def get_trx_list_by_time(
        self, start_timestamp: int, end_timestamp: int, page_size: int = DEFAULT_PAGE_SIZE
    ) -> RangePager:
        return self._range_pager(
            "getTrxListByTime",
            "list",
            "last_info",
            lambda item: item,
            start={"utc_seconds": start_timestamp},
            end={"utc_seconds": end_timestamp},
            page_size=page_size,
        )

    def get_post_list_by_create_time(
        self, start_timestamp: int, end_timestamp: int, page_size: int = DEFAULT_PAGE_SIZE
    ) -> RangePager:
        return self._range_pager(
            "getPostListByCreateTime",
            "posted_list",
            "last_post",
            lambda item: item,
            start={"utc_seconds": start_timestamp},
            end={"utc_seconds": end_timestamp},
            page_size=page_size,
        )

    def get_post_list_by_name(self, author: str, page_size: int = DEFAULT_PAGE_SIZE) -> RangePager:
        return self._range_pager(
            "getPostListByName",
            "posted_list",
            "last_post",
            lambda item: item,
            start={"author": author, "create": MIN_TIMESTAMP},
            end={"author": author, "create": MAX_TIMESTAMP},
            page_size=page_size,
        )

    def get_user_trx_list_by_time(
        self, account_name: str, start_timestamp: int, end_timestamp: int, page_size: int = DEFAULT_PAGE_SIZE
    ) -> RangePager:
        return self._range_pager(
            "getUserTrxListByTime",
            "trx_list",
            "last_trx",
            lambda item: item,
            start={"utc_seconds": start_timestamp},
            end={"utc_seconds": end_timestamp},
            page_size=page_size,
            extra={"name": account_name},
        )
