"""
Talent-Triage: candidate/job matching and automated application triage.
"""

__app_name__ = "Talent-Triage"
__version__ = "0.1.0"
