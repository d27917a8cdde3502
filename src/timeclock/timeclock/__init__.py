"""Restaurant Time Clock package.

Organized by feature modules (restaurants, employees, schedules, timeclocks,
incidents, notifications) with a thin Flask controller layer on top of
service/repository layers.
"""
