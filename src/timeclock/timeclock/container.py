from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_LEAD_MINUTES, DEFAULT_LOOKBACK_MINUTES, DEFAULT_TIME_ZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AuthService, EmployeeService
from .incidents.mysql_incident_repository import MySQLIncidentRepository
from .incidents.service import IncidentService
from .notifications.delivery import PushDeliveryAdapter, VapidConfig
from .notifications.engine import NotificationEngine
from .notifications.model import NotificationOptions
from .notifications.mysql_notification_log_repository import MySQLNotificationLogRepository
from .notifications.mysql_push_subscription_repository import MySQLPushSubscriptionRepository
from .notifications.service import PushSubscriptionService
from .restaurants.mysql_restaurant_repository import MySQLRestaurantRepository
from .restaurants.service import RestaurantService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .timeclocks.mysql_timeclock_repository import MySQLTimeclockRepository
from .timeclocks.service import ClockService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    time_zone: str
    cron_secret: str

    restaurants_repo: MySQLRestaurantRepository
    employees_repo: MySQLEmployeeRepository
    schedules_repo: MySQLScheduleRepository
    timeclocks_repo: MySQLTimeclockRepository
    incidents_repo: MySQLIncidentRepository
    notification_logs_repo: MySQLNotificationLogRepository
    push_subscriptions_repo: MySQLPushSubscriptionRepository

    auth_service: AuthService
    restaurant_service: RestaurantService
    employee_service: EmployeeService
    schedule_service: ScheduleService
    clock_service: ClockService
    incident_service: IncidentService
    push_subscription_service: PushSubscriptionService
    notification_engine: NotificationEngine


def build_container(
    *,
    db_config: dict,
    time_zone: str = DEFAULT_TIME_ZONE,
    lead_minutes: int = DEFAULT_LEAD_MINUTES,
    lookback_minutes: int = DEFAULT_LOOKBACK_MINUTES,
    vapid: VapidConfig = VapidConfig(),
    cron_secret: str = "",
    admin_username: str = "admin",
    admin_password: str = "",
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    restaurants_repo = MySQLRestaurantRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    timeclocks_repo = MySQLTimeclockRepository(conn)
    incidents_repo = MySQLIncidentRepository(conn)
    notification_logs_repo = MySQLNotificationLogRepository(conn)
    push_subscriptions_repo = MySQLPushSubscriptionRepository(conn)

    delivery = PushDeliveryAdapter(vapid)

    auth_service = AuthService(employees_repo, admin_username=admin_username, admin_password=admin_password)
    restaurant_service = RestaurantService(restaurants_repo)
    employee_service = EmployeeService(employees_repo, schedules_repo)
    schedule_service = ScheduleService(schedules_repo)
    clock_service = ClockService(
        timeclocks_repo,
        employees_repo,
        restaurants_repo,
        schedules_repo,
        time_zone=time_zone,
    )
    incident_service = IncidentService(incidents_repo, employees_repo)
    push_subscription_service = PushSubscriptionService(push_subscriptions_repo, employees_repo, delivery)
    notification_engine = NotificationEngine(
        schedules_repo,
        timeclocks_repo,
        notification_logs_repo,
        push_subscriptions_repo,
        delivery,
        options=NotificationOptions(
            time_zone=time_zone,
            lead_minutes=int(lead_minutes),
            lookback_minutes=int(lookback_minutes),
        ),
        health_check=conn.is_available,
    )

    return Container(
        conn=conn,
        time_zone=time_zone,
        cron_secret=cron_secret,
        restaurants_repo=restaurants_repo,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        timeclocks_repo=timeclocks_repo,
        incidents_repo=incidents_repo,
        notification_logs_repo=notification_logs_repo,
        push_subscriptions_repo=push_subscriptions_repo,
        auth_service=auth_service,
        restaurant_service=restaurant_service,
        employee_service=employee_service,
        schedule_service=schedule_service,
        clock_service=clock_service,
        incident_service=incident_service,
        push_subscription_service=push_subscription_service,
        notification_engine=notification_engine,
    )
