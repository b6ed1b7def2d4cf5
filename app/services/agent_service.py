import logging

from sqlalchemy.orm import Session

from database.init import atomic
from database.models import Agent, Property, PropertyService
from schemas.account_schema import AgentCreate, AgentUpdate
from services.account_service import AccountService
from services.email_service import EmailService
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)


class AgentService(AccountService):
    label = "Agent"

    def __init__(self):
        super().__init__(Agent)

    async def add_agent(self, db: Session, payload: AgentCreate, email_service: EmailService) -> Agent:
        self.ensure_email_available(db, payload.email)
        with atomic(db):
            agent = self.create(db, self.build(payload.name, payload.email, payload.password), commit=False)
            await email_service.send_invitation_email(agent.email, "Agent")
        db.refresh(agent)
        logger.info("Agent added", extra={"agent_id": agent.id})
        return agent

    def edit_agent(self, db: Session, agent_id: int, payload: AgentUpdate) -> Agent:
        agent = self.require(db, agent_id)
        agent = self.update_account(db, agent, payload.name, payload.email)
        logger.info("Agent updated", extra={"agent_id": agent_id})
        return agent

    def delete_agent(self, db: Session, agent_id: int) -> None:
        agent = self.require(db, agent_id)
        property_count = db.query(Property).filter(Property.agent_id == agent_id).count()
        assignment_count = (
            db.query(PropertyService)
            .filter(PropertyService.assigned_by_agent_id == agent_id)
            .count()
        )
        if property_count or assignment_count:
            raise ConflictError(
                "Cannot delete agent with properties or assignments.",
                {"property_count": property_count, "assignment_count": assignment_count},
            )
        self.delete(db, agent)
        logger.info("Agent deleted", extra={"agent_id": agent_id})

    def soft_delete_agent(self, db: Session, agent_id: int) -> Agent:
        agent = self.soft_delete(db, self.require_active(db, agent_id))
        logger.info("Agent soft deleted", extra={"agent_id": agent_id})
        return agent
