# Fixed reference data inserted by every seed run.

DEPARTMENTS = [
    {"department_name": "Engineering", "location": "Building A, 3F"},
    {"department_name": "Marketing", "location": "Building B, 2F"},
    {"department_name": "Human Resources", "location": "Building A, 2F"},
    {"department_name": "Finance", "location": "Building C, 1F"},
    {"department_name": "Sales", "location": "Building B, 1F"},
    {"department_name": "Customer Service", "location": "Building C, 2F"},
    {"department_name": "Operations", "location": "Building A, 1F"},
]

POSITIONS = [
    {"position_name": "Senior Engineer", "level": "P5", "description": "Develops core systems"},
    {"position_name": "Engineer", "level": "P4", "description": "Builds product features"},
    {"position_name": "Junior Engineer", "level": "P3", "description": "Builds foundational features"},
    {"position_name": "Engineering Manager", "level": "M3", "description": "Leads the engineering team"},
    {"position_name": "Product Manager", "level": "P5", "description": "Plans and designs products"},
    {"position_name": "Marketing Manager", "level": "M2", "description": "Owns marketing strategy"},
    {"position_name": "Finance Supervisor", "level": "M2", "description": "Oversees accounting and finance"},
    {"position_name": "HR Specialist", "level": "P3", "description": "Handles recruiting and staff records"},
    {"position_name": "Sales Director", "level": "M4", "description": "Leads the sales organization"},
    {"position_name": "Customer Service Specialist", "level": "P2", "description": "Supports customers"},
]

# Positions at these catalog indexes are handed to the manager phase; all others go to staff
MANAGER_POSITIONS = slice(3, 7)

PROJECTS = [
    {"project_name": "Enterprise Resource Planning", "description": "Integrated HR, finance and project management", "budget": 1_000_000},
    {"project_name": "Customer Relationship Platform", "description": "Customer records and sales pipeline", "budget": 800_000},
    {"project_name": "Data Visualization Toolkit", "description": "Analytics and reporting", "budget": 600_000},
    {"project_name": "Mobile Workplace App", "description": "Mobile collaboration for employees", "budget": 700_000},
    {"project_name": "Supply Chain Management", "description": "Purchasing, inventory and logistics", "budget": 900_000},
    {"project_name": "E-commerce Platform Upgrade", "description": "Better user experience and performance", "budget": 1_200_000},
    {"project_name": "Smart Attendance", "description": "Face recognition check-in", "budget": 400_000},
    {"project_name": "Learning Platform", "description": "Online training and course management", "budget": 500_000},
]

PROJECT_ROLES = [
    "Project Manager",
    "Developer",
    "QA Engineer",
    "UI Designer",
    "Product Manager",
    "Technical Consultant",
]

TRAININGS = [
    {"training_name": "Leadership Development", "trainer_name": "Prof. Zhang", "location": "Training Room A"},
    {"training_name": "Software Architecture", "trainer_name": "Li (Principal Engineer)", "location": "Training Room B"},
    {"training_name": "Project Management in Practice", "trainer_name": "Wang (PMO)", "location": "Meeting Room C"},
    {"training_name": "Teamwork and Communication", "trainer_name": "Liu", "location": "Training Room A"},
    {"training_name": "Data Analysis and Visualization", "trainer_name": "Chen (Analyst)", "location": "Training Room B"},
    {"training_name": "Customer Service Skills", "trainer_name": "Zhao", "location": "Meeting Room D"},
    {"training_name": "Creative Thinking", "trainer_name": "Yang (Consultant)", "location": "Innovation Space"},
    {"training_name": "Time Management", "trainer_name": "Wu", "location": "Training Room C"},
]

TRAINING_FEEDBACK = "Rich content, learned a lot"
