"""Check account and transaction tools."""

from typing import List, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import Number, ToolArguments, build_payload, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import ListArguments, embed_params

TRANSACTION_REFERENCES = {"checkAccountId": ("checkAccount", "CheckAccount")}


class ListTransactionsArguments(ListArguments):
    check_account_id: Optional[str] = Field(None, description="Filter by check account ID")
    start_date: Optional[str] = Field(None, description="Filter by start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Filter by end date (YYYY-MM-DD)")
    is_booked: Optional[bool] = Field(None, description="Filter by booking status")


class GetTransactionArguments(ToolArguments):
    transaction_id: str = Field(..., description="The ID of the transaction to retrieve")
    embed: Optional[List[str]] = Field(None, description="Related objects to embed")


class CreateTransactionArguments(ToolArguments):
    check_account_id: int = Field(..., description="The ID of the check account")
    value_date: str = Field(..., description="Value date (YYYY-MM-DD)")
    amount: Number = Field(..., description="Transaction amount (positive for income, negative for expense)")
    entry_date: Optional[str] = Field(None, description="Entry date (YYYY-MM-DD)")
    paymt_purpose: Optional[str] = Field(None, description="Payment purpose/description")
    payee_payer_name: Optional[str] = Field(None, description="Name of payee/payer")
    payee_payer_acct_no: Optional[str] = Field(None, description="Account number of payee/payer (IBAN)")
    payee_payer_bank_code: Optional[str] = Field(None, description="Bank code of payee/payer (BIC)")
    status: Optional[int] = Field(
        None, description="Transaction status (100=Created, 200=Linked, 300=Private, 400=Booked)"
    )


class UpdateTransactionArguments(ToolArguments):
    transaction_id: str = Field(..., description="The ID of the transaction to update")
    paymt_purpose: Optional[str] = Field(None, description="Payment purpose/description")
    payee_payer_name: Optional[str] = Field(None, description="Name of payee/payer")
    payee_payer_acct_no: Optional[str] = Field(None, description="Account number of payee/payer (IBAN)")
    payee_payer_bank_code: Optional[str] = Field(None, description="Bank code of payee/payer (BIC)")
    status: Optional[int] = Field(
        None, description="Transaction status (100=Created, 200=Linked, 300=Private, 400=Booked)"
    )


def register(registry: ToolRegistry) -> None:
    @registry.tool(
        "list_check_accounts",
        "List all payment accounts (bank accounts, cash registers, etc.).",
        ListArguments,
    )
    async def list_check_accounts(client, args: ListArguments):
        return await client.list_check_accounts(build_query(args))

    @registry.tool("list_transactions", "List transactions for payment accounts.", ListTransactionsArguments)
    async def list_transactions(client, args: ListTransactionsArguments):
        return await client.list_transactions(build_query(args, TRANSACTION_REFERENCES))

    @registry.tool("get_transaction", "Get detailed information about a specific transaction.", GetTransactionArguments)
    async def get_transaction(client, args: GetTransactionArguments):
        return await client.get_transaction(args.transaction_id, embed_params(args.embed))

    @registry.tool("create_transaction", "Create a new transaction in a check account.", CreateTransactionArguments)
    async def create_transaction(client, args: CreateTransactionArguments):
        return await client.create_transaction(build_payload(args, TRANSACTION_REFERENCES))

    @registry.tool("update_transaction", "Update an existing transaction.", UpdateTransactionArguments)
    async def update_transaction(client, args: UpdateTransactionArguments):
        return await client.update_transaction(args.transaction_id, build_payload(args, exclude=("transactionId",)))
