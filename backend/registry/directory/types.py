from pydantic import BaseModel, Field


class ServerEntry(BaseModel):
    """One known game server.

    name/ip/port/game_mode are published to clients. The remaining fields
    belong to the health tracker and never leave the process.
    """

    name: str
    ip: str
    port: int
    game_mode: str = ""

    healthy: bool = True
    passed_checks: int = Field(default=0, ge=0)
    failed_checks: int = Field(default=0, ge=0)

    def record_line(self) -> str:
        """Render the client-facing ``name,ip,port,mode`` line."""
        return f"{self.name},{self.ip},{self.port},{self.game_mode}"
