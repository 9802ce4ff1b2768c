import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp, matching how DateTime columns are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    auth_uid = Column(String(255), unique=True, index=True, nullable=False)  # Auth provider subject
    email = Column(String(255), index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    role = Column(String(20), default="planner", nullable=False)  # planner, vendor, client, admin
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    events = relationship("Event", back_populates="planner")
    leads = relationship("Lead", back_populates="planner")
    vendor_profile = relationship(
        "Vendor", back_populates="user", uselist=False, foreign_keys="Vendor.user_id"
    )


class Lead(Base):
    __tablename__ = "leads"

    id = Column(String(36), primary_key=True, default=generate_id)
    planner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    event_type = Column(String(50), nullable=True)
    event_date = Column(Date, nullable=True)
    budget = Column(Float, nullable=True)
    budget_range = Column(String(100), nullable=True)  # Free text, e.g. "5-10 lakhs"
    guest_count = Column(Integer, nullable=True)
    source = Column(String(50), nullable=True)
    score = Column(Integer, default=0, nullable=False)
    status = Column(String(20), default="new", nullable=False)  # see LEAD_TRANSITIONS
    notes = Column(Text, nullable=True)
    converted_event_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    planner = relationship("User", back_populates="leads")


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=generate_id)
    planner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    lead_id = Column(String(36), ForeignKey("leads.id"), nullable=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)  # wedding, corporate, birthday, social, other
    status = Column(String(20), default="draft", nullable=False)  # see EVENT_TRANSITIONS
    date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)
    guest_count = Column(Integer, default=0, nullable=False)
    budget_min = Column(Float, default=0, nullable=False)
    budget_max = Column(Float, default=0, nullable=False)
    city = Column(String(100), nullable=True)
    venue_type = Column(String(20), nullable=True)  # personal, showroom
    venue_id = Column(String(36), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    planner = relationship("User", back_populates="events")
    bookings = relationship("BookingRequest", back_populates="event", cascade="all, delete-orphan")
    budget_items = relationship("BudgetItem", back_populates="event", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="event", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="event", cascade="all, delete-orphan")
    timeline_items = relationship(
        "TimelineItem", back_populates="event", cascade="all, delete-orphan"
    )
    functions = relationship(
        "EventFunction",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventFunction.sort_order",
    )


class EventFunction(Base):
    """One function of a multi-day event, e.g. the haldi or the reception"""

    __tablename__ = "event_functions"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)  # see FUNCTION_TYPES
    date = Column(Date, nullable=True)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)
    venue_name = Column(String(200), nullable=True)
    venue_address = Column(String(500), nullable=True)
    guest_count = Column(Integer, nullable=True)
    budget = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="functions")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_id)
    planner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    alternate_phone = Column(String(20), nullable=True)
    status = Column(String(20), default="prospect", nullable=False)  # prospect, active, past, inactive
    address = Column(String(500), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    # {communicationMethod, budgetRange, preferredVenues, dietaryRestrictions, notes}
    preferences = Column(JSON, nullable=True)
    total_events = Column(Integer, default=0, nullable=False)
    total_spend = Column(Float, default=0, nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    referral_source = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=generate_id)
    # A vendor is either a planner's private CRM contact or a marketplace profile owned by a vendor user
    planner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, unique=True)
    company_name = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    website = Column(String(500), nullable=True)
    category = Column(String(30), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    price_min = Column(Float, nullable=True)
    price_max = Column(Float, nullable=True)
    rating = Column(Float, default=0, nullable=False)
    review_count = Column(Integer, default=0, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    image_url = Column(String(500), nullable=True)
    portfolio_urls = Column(JSON, default=list, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="vendor_profile", foreign_keys=[user_id])
    bookings = relationship("BookingRequest", back_populates="vendor")


class BookingRequest(Base):
    __tablename__ = "booking_requests"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    planner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    function_id = Column(String(36), ForeignKey("event_functions.id"), nullable=True)
    status = Column(String(20), default="quote_requested", nullable=False)
    service_category = Column(String(30), nullable=True)
    service_details = Column(Text, nullable=True)
    quoted_amount = Column(Float, nullable=True)
    agreed_amount = Column(Float, nullable=True)
    currency = Column(String(3), default="INR", nullable=False)
    # [{id, name, amount, dueDate, paidDate, status}]
    payment_schedule = Column(JSON, default=list, nullable=True)
    requested_date = Column(DateTime, default=utcnow)
    response_date = Column(DateTime, nullable=True)
    confirmation_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    internal_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="bookings")
    function = relationship("EventFunction")
    vendor = relationship("Vendor", back_populates="bookings")
    messages = relationship(
        "BookingMessage",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingMessage.created_at",
    )


class BookingMessage(Base):
    __tablename__ = "booking_messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    booking_request_id = Column(
        String(36), ForeignKey("booking_requests.id"), nullable=False, index=True
    )
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    message = Column(Text, nullable=False)
    is_system = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    booking = relationship("BookingRequest", back_populates="messages")


class BudgetItem(Base):
    __tablename__ = "budget_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    function_id = Column(String(36), ForeignKey("event_functions.id"), nullable=True)
    category = Column(String(30), nullable=False)
    description = Column(String(500), nullable=False)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=True)
    booking_request_id = Column(String(36), ForeignKey("booking_requests.id"), nullable=True)
    estimated_amount = Column(Float, default=0, nullable=False)
    actual_amount = Column(Float, nullable=True)
    paid_amount = Column(Float, default=0, nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="budget_items")
    function = relationship("EventFunction")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    booking_request_id = Column(String(36), ForeignKey("booking_requests.id"), nullable=True)
    budget_item_id = Column(String(36), ForeignKey("budget_items.id"), nullable=True)
    type = Column(String(20), nullable=False)  # client_payment, vendor_payment, refund, expense
    status = Column(String(20), default="pending", nullable=False)
    method = Column(String(20), nullable=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    paid_by = Column(String(255), nullable=True)
    paid_to = Column(String(255), nullable=True)
    due_date = Column(Date, nullable=True)
    paid_date = Column(Date, nullable=True)
    reference = Column(String(255), nullable=True)
    receipt_url = Column(String(500), nullable=True)
    description = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="payments")
    budget_item = relationship("BudgetItem")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # see TASK_TRANSITIONS
    priority = Column(String(10), default="medium", nullable=False)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    proof_urls = Column(JSON, default=list, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="tasks")
    vendor = relationship("Vendor")


class TimelineItem(Base):
    __tablename__ = "timeline_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    function_id = Column(String(36), ForeignKey("event_functions.id"), nullable=True, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=True)
    duration = Column(Integer, nullable=True)  # minutes
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    owner = Column(String(255), nullable=False)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    notes = Column(Text, nullable=True)
    depends_on = Column(JSON, nullable=True)  # list of timeline item ids
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    event = relationship("Event", back_populates="timeline_items")
    function = relationship("EventFunction")
