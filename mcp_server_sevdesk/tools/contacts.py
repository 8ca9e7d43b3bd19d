"""Contact and contact address tools."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from mcp_server_sevdesk.payloads import ToolArguments, build_payload, build_query
from mcp_server_sevdesk.registry import ToolRegistry
from mcp_server_sevdesk.tools.common import ListArguments, NoArguments, embed_params

CONTACT_REFERENCES = {"categoryId": ("category", "Category")}

ADDRESS_REFERENCES = {
    "contactId": ("contact", "Contact"),
    "countryId": ("country", "StaticCountry"),
    "categoryId": ("category", "Category"),
}


class ListContactsArguments(ListArguments):
    depth: Optional[int] = Field(None, description="Depth of nested objects (0-3)")
    customer_number: Optional[str] = Field(None, description="Filter by customer number")
    name: Optional[str] = Field(None, description="Filter by name (partial match)")


class GetContactArguments(ToolArguments):
    contact_id: str = Field(..., description="The ID of the contact to retrieve")
    embed: Optional[List[str]] = Field(
        None, description="Related objects to embed (e.g., communicationWays, addresses)"
    )


class CreateContactArguments(ToolArguments):
    name: str = Field(..., description="Company name or display name")
    category_id: int = Field(..., description="Category ID (3=Customer, 4=Supplier, 28=Partner)")
    name2: Optional[str] = Field(None, description="Additional name field")
    surename: Optional[str] = Field(None, description="First name (for persons)")
    familyname: Optional[str] = Field(None, description="Last name (for persons)")
    customer_number: Optional[str] = Field(None, description="Custom customer number")
    description: Optional[str] = Field(None, description="Description or notes")
    vat_number: Optional[str] = Field(None, description="VAT number")
    tax_number: Optional[str] = Field(None, description="Tax number")
    bank_account: Optional[str] = Field(None, description="Bank account number (IBAN)")
    bank_number: Optional[str] = Field(None, description="Bank code (BIC)")
    default_time_to_pay: Optional[int] = Field(None, description="Default payment terms in days")
    gender: Optional[str] = Field(None, description="Gender (m/f)")
    academic_title: Optional[str] = Field(None, description="Academic title")
    titel: Optional[str] = Field(None, description="Title (e.g., Dr.)")
    birthday: Optional[str] = Field(None, description="Birthday (YYYY-MM-DD)")
    exempt_vat: Optional[bool] = Field(None, description="Exempt from VAT")


class UpdateContactArguments(ToolArguments):
    contact_id: str = Field(..., description="The ID of the contact to update")
    name: Optional[str] = Field(None, description="Company name or display name")
    name2: Optional[str] = Field(None, description="Additional name field")
    surename: Optional[str] = Field(None, description="First name")
    familyname: Optional[str] = Field(None, description="Last name")
    customer_number: Optional[str] = Field(None, description="Customer number")
    description: Optional[str] = Field(None, description="Description or notes")
    vat_number: Optional[str] = Field(None, description="VAT number")
    tax_number: Optional[str] = Field(None, description="Tax number")
    bank_account: Optional[str] = Field(None, description="Bank account number (IBAN)")
    bank_number: Optional[str] = Field(None, description="Bank code (BIC)")
    default_time_to_pay: Optional[int] = Field(None, description="Default payment terms in days")
    exempt_vat: Optional[bool] = Field(None, description="Exempt from VAT")


class ContactIdArguments(ToolArguments):
    contact_id: str = Field(..., description="The ID of the contact")


class CreateContactAddressArguments(ToolArguments):
    contact_id: int = Field(..., description="The ID of the contact")
    country_id: int = Field(..., description="Country ID (1=Germany, see sevDesk documentation for others)")
    street: Optional[str] = Field(None, description="Street and house number")
    zip: Optional[str] = Field(None, description="ZIP/Postal code")
    city: Optional[str] = Field(None, description="City")
    name: Optional[str] = Field(None, description="Name line 1")
    name2: Optional[str] = Field(None, description="Name line 2")
    name3: Optional[str] = Field(None, description="Name line 3")
    name4: Optional[str] = Field(None, description="Name line 4")
    category_id: Optional[int] = Field(None, description="Address category ID")


def build_contact(args: CreateContactArguments) -> Dict[str, Any]:
    return build_payload(args, CONTACT_REFERENCES)


def build_contact_update(args: UpdateContactArguments) -> Dict[str, Any]:
    return build_payload(args, exclude=("contactId",))


def build_address_filter(contact_id: str) -> Dict[str, Any]:
    return build_query({"contactId": contact_id}, {"contactId": ("contact", "Contact")})


def build_contact_address(args: CreateContactAddressArguments) -> Dict[str, Any]:
    return build_payload(args, ADDRESS_REFERENCES)


def register(registry: ToolRegistry) -> None:
    @registry.tool(
        "list_contacts",
        "List contacts with optional filters. Returns customers, suppliers, and other contacts.",
        ListContactsArguments,
    )
    async def list_contacts(client, args: ListContactsArguments):
        return await client.list_contacts(build_query(args))

    @registry.tool("get_contact", "Get detailed information about a specific contact by ID.", GetContactArguments)
    async def get_contact(client, args: GetContactArguments):
        return await client.get_contact(args.contact_id, embed_params(args.embed))

    @registry.tool("create_contact", "Create a new contact (customer, supplier, or partner).", CreateContactArguments)
    async def create_contact(client, args: CreateContactArguments):
        return await client.create_contact(build_contact(args))

    @registry.tool("update_contact", "Update an existing contact.", UpdateContactArguments)
    async def update_contact(client, args: UpdateContactArguments):
        return await client.update_contact(args.contact_id, build_contact_update(args))

    @registry.tool(
        "delete_contact",
        "Delete a contact. Note: This may fail if the contact has associated documents.",
        ContactIdArguments,
    )
    async def delete_contact(client, args: ContactIdArguments):
        await client.delete_contact(args.contact_id)
        return f"Contact {args.contact_id} deleted successfully."

    @registry.tool("get_next_customer_number", "Generate the next available customer number.", NoArguments)
    async def get_next_customer_number(client, args: NoArguments):
        return await client.get_next_customer_number()

    @registry.tool("list_contact_addresses", "List all addresses for a specific contact.", ContactIdArguments)
    async def list_contact_addresses(client, args: ContactIdArguments):
        return await client.list_contact_addresses(build_address_filter(args.contact_id))

    @registry.tool("create_contact_address", "Create a new address for a contact.", CreateContactAddressArguments)
    async def create_contact_address(client, args: CreateContactAddressArguments):
        return await client.create_contact_address(build_contact_address(args))
