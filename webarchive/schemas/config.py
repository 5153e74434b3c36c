from pydantic import BaseModel

class ShowRecentConfig(BaseModel):
    should_show_recent: bool
