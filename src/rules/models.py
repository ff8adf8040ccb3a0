from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class DiscountMessagesRules(BaseModel):
    referral: str = "Referral discount: {percentage}% off"
    store_credit: str = "Store credit: {currency_symbol}{amount}"

    @field_validator("referral")
    @classmethod
    def _referral_placeholders(cls, value: str) -> str:
        try:
            value.format(percentage="10")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"referral message may only use {{percentage}}: {e}") from e
        return value

    @field_validator("store_credit")
    @classmethod
    def _store_credit_placeholders(cls, value: str) -> str:
        try:
            value.format(currency_symbol="$", amount="1.00")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"store_credit message may only use {{currency_symbol}} and {{amount}}: {e}"
            ) from e
        return value

class DiscountRules(BaseModel):
    required_discount_class: str = "ORDER"
    currency_symbol: str = Field(default="$", max_length=4)
    messages: DiscountMessagesRules = Field(default_factory=DiscountMessagesRules)

class LoggingRules(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

class Rules(BaseModel):
    project: ProjectRules
    discounts: DiscountRules
    logging: LoggingRules = Field(default_factory=LoggingRules)
