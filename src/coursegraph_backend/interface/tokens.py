from pydantic import BaseModel, ConfigDict


class TokenEntry(BaseModel):
    """Pair of user id and secret, the only state kept in the token cache"""

    user_id: int
    token: str

    model_config = ConfigDict(frozen=True)
